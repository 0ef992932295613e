"""Confirmation URL validation and email-body parsing"""

import re
from typing import List, Optional

from src.forwarding.errors import InvalidRequestFormat, UrlNotFound
from src.forwarding.models import ForwardingRequest
from src.forwarding.patterns import (
    CONFIRMATION_URL_PATTERN,
    CONFIRMATION_URL_PREFIX,
    FORWARDING_REQUEST_KEYWORDS,
)


def is_valid_confirmation_url(url: str) -> bool:
    """Case-sensitive prefix check; no network access, no redirects"""
    if not isinstance(url, str):
        return False
    return url.startswith(CONFIRMATION_URL_PREFIX)


def extract_confirmation_urls(body: str) -> List[str]:
    """All confirmation links in an email body, in order of appearance"""
    if not body:
        return []
    matches = re.findall(CONFIRMATION_URL_PATTERN, body)
    return [match.rstrip("\r\n").strip() for match in matches]


def extract_email_from_snippet(snippet: str) -> Optional[str]:
    if not snippet:
        return None
    match = re.search(r"(\S+@\S+\.\S+)", snippet)
    return match.group(1) if match else None


def is_forwarding_request_snippet(snippet: str) -> bool:
    """Whether an email snippet reads like a Gmail forwarding request"""
    snippet_lower = (snippet or "").lower()
    return any(keyword in snippet_lower for keyword in FORWARDING_REQUEST_KEYWORDS)


def request_from_email(snippet: str, body: str) -> ForwardingRequest:
    """
    Build a request from a forwarding-confirmation email.

    The first confirmation link in the body is used.

    Raises:
        InvalidRequestFormat: Snippet is not a forwarding request
        UrlNotFound: Body has no confirmation link
    """
    email = extract_email_from_snippet(snippet)
    if not is_forwarding_request_snippet(snippet):
        raise InvalidRequestFormat(email=email)

    urls = extract_confirmation_urls(body)
    if not urls:
        raise UrlNotFound(email=email)

    return ForwardingRequest(url=urls[0], email=email)
