"""Data models for forwarding confirmation requests"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ForwardingRequest(BaseModel):
    """Inbound request to accept one forwarding confirmation"""
    url: str  # Format is checked by ForwardingService
    email: Optional[str] = None  # Forwarding address, echoed back in the result


class ForwardingResult(BaseModel):
    """Outcome of one accept_forwarding call.

    Serialised with camelCase aliases (responseTime, alreadyConfirmed).
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    success: bool
    message: str
    url: Optional[str] = None
    email: Optional[str] = None
    response_time: int = Field(ge=0)  # Milliseconds
    already_confirmed: Optional[bool] = None

    @model_validator(mode="after")
    def _already_confirmed_implies_success(self) -> "ForwardingResult":
        if self.already_confirmed and not self.success:
            raise ValueError("already_confirmed results must be successful")
        return self

    def to_response(self) -> dict:
        """JSON body for API/CLI output"""
        return self.model_dump(by_alias=True, exclude_none=True)


class HeadlessMode(str, Enum):
    """Chromium headless implementation to request"""
    LEGACY = "legacy"
    NEW = "new"


class LaunchConfig(BaseModel):
    """One candidate set of parameters for starting a browser"""
    model_config = ConfigDict(frozen=True)

    executable_path: Optional[str] = None  # None = let Playwright find its browser
    headless_mode: HeadlessMode = HeadlessMode.NEW
    args: Tuple[str, ...] = ()

    @property
    def label(self) -> str:
        path = self.executable_path or "auto-detect"
        return f"{path} (headless={self.headless_mode.value}, {len(self.args)} args)"


class SelectorKind(str, Enum):
    CSS = "css"
    TEXT = "text"


class SelectorStrategy(BaseModel):
    """How to find the confirmation control"""
    model_config = ConfigDict(frozen=True)

    kind: SelectorKind
    value: str

    @property
    def description(self) -> str:
        if self.kind == SelectorKind.TEXT:
            return f"button text contains '{self.value}'"
        return self.value
