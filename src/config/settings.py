"""Service configuration loaded from environment variables / .env"""

import os
import sys
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator


class ConfigError(Exception):
    """Raised when environment configuration is invalid"""


# Used only in development when no explicit browser path is configured
DEVELOPMENT_BROWSER_PATHS = {
    'darwin': '/Applications/Google Chrome.app/Contents/MacOS/Google Chrome',
    'win32': 'C:\\Program Files\\Google\\Chrome\\Application\\chrome.exe',
}


class Settings(BaseModel):
    """Validated service settings"""

    env: Literal['development', 'production', 'test', 'staging'] = 'development'
    host: str = '0.0.0.0'
    port: int = Field(default=3000, ge=1, le=65535)

    log_level: Literal['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL'] = 'INFO'
    log_format: Literal['simple', 'json'] = 'simple'
    log_dir: str = 'logs'

    # Browser
    browser_timeout_ms: int = Field(default=30000, gt=0)
    browser_executable_path: Optional[str] = None

    # Workflow timing (seconds)
    navigation_attempts: int = Field(default=3, ge=1)
    navigation_retry_delay: float = Field(default=2.0, ge=0)
    page_settle_delay: float = Field(default=3.0, ge=0)
    click_settle_delay: float = Field(default=3.0, ge=0)
    verify_attempts: int = Field(default=3, ge=1)
    verify_retry_delay: float = Field(default=1.0, ge=0)

    # HTTP surface
    enable_metrics: bool = True
    cors_origin: str = '*'
    api_key_required: bool = False
    api_keys: List[str] = Field(default_factory=list)
    api_key_header: str = 'x-api-key'

    @field_validator('log_level', mode='before')
    @classmethod
    def _upper_level(cls, value):
        if isinstance(value, str):
            value = value.upper()
            # Accept the short names used by older deployments
            return {'WARN': 'WARNING', 'ERR': 'ERROR'}.get(value, value)
        return value

    @field_validator('browser_executable_path', mode='before')
    @classmethod
    def _blank_path_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator('api_keys', mode='before')
    @classmethod
    def _split_keys(cls, value):
        if isinstance(value, str):
            return [key.strip() for key in value.split(',') if key.strip()]
        return value

    @property
    def is_production(self) -> bool:
        return self.env == 'production'

    @property
    def is_development(self) -> bool:
        return self.env == 'development'

    @property
    def resolved_executable_path(self) -> Optional[str]:
        """Explicit browser path, or the platform default in development"""
        if self.browser_executable_path:
            return self.browser_executable_path
        if self.is_development:
            return DEVELOPMENT_BROWSER_PATHS.get(sys.platform)
        return None

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            load_env_file: Load a .env file first (existing variables win)

        Raises:
            ConfigError: A variable is present but invalid
        """
        if load_env_file:
            load_dotenv()

        env_map = {
            'env': 'APP_ENV',
            'host': 'HOST',
            'port': 'PORT',
            'log_level': 'LOG_LEVEL',
            'log_format': 'LOG_FORMAT',
            'log_dir': 'LOG_DIR',
            'browser_timeout_ms': 'BROWSER_TIMEOUT_MS',
            'browser_executable_path': 'BROWSER_EXECUTABLE_PATH',
            'navigation_attempts': 'NAVIGATION_ATTEMPTS',
            'navigation_retry_delay': 'NAVIGATION_RETRY_DELAY',
            'page_settle_delay': 'PAGE_SETTLE_DELAY',
            'click_settle_delay': 'CLICK_SETTLE_DELAY',
            'verify_attempts': 'VERIFY_ATTEMPTS',
            'verify_retry_delay': 'VERIFY_RETRY_DELAY',
            'enable_metrics': 'ENABLE_METRICS',
            'cors_origin': 'CORS_ORIGIN',
            'api_key_required': 'API_KEY_REQUIRED',
            'api_keys': 'API_KEYS',
            'api_key_header': 'API_KEY_HEADER',
        }

        values = {}
        for field, var in env_map.items():
            value = os.getenv(var)
            if value is not None and value != '':
                values[field] = value

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Config validation error: {e}") from e
