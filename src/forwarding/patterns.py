"""Target-page contract for the Gmail forwarding confirmation flow.

Everything the service assumes about Google's confirmation page lives here:
- The URL prefix a confirmation link must start with
- Phrases that show forwarding is active
- Ordered selector strategies for the confirmation control

Google can change this page without notice. When it does, this is the
only module that should need editing.
"""

from src.forwarding.models import SelectorKind, SelectorStrategy


# =============================================================================
# CONFIRMATION URL
# =============================================================================

# Scheme + host + path prefix, matched case-sensitively
CONFIRMATION_URL_PREFIX = "https://mail-settings.google.com/mail"

# Used to pull confirmation links out of a raw email body
CONFIRMATION_URL_PATTERN = r"https://mail-settings\.google\.com/mail[^\s,<>\"']+"

# Snippet phrases that identify a forwarding request email
FORWARDING_REQUEST_KEYWORDS = [
    "has requested to automatically forward mail to your email address",
    "forward mail to",
    "forwarding confirmation",
]


# =============================================================================
# CONFIRMATION STATE DETECTION
# =============================================================================

# Lower-cased substrings; any match means forwarding is confirmed
CONFIRMATION_PHRASES = frozenset([
    "may now forward mail to",
    "forwarding is enabled",
    "forwarding has been confirmed",
    "confirmation success",
])


# =============================================================================
# CONFIRMATION CONTROL
# =============================================================================

# Everything that can act as a button on the page
BUTTON_LIKE_SELECTOR = (
    "button, input[type='submit'], input[type='button'], [role='button']"
)

# Ordered by priority; first visible match wins
CONFIRMATION_STRATEGIES = (
    # Exact-value submit inputs
    SelectorStrategy(kind=SelectorKind.CSS, value="input[type='submit'][value='Confirm']"),
    SelectorStrategy(kind=SelectorKind.CSS, value="input[value='Confirm']"),

    # Partial-value submit inputs
    SelectorStrategy(kind=SelectorKind.CSS, value="input[type='submit'][value*='Confirm' i]"),

    # Generic submit buttons
    SelectorStrategy(kind=SelectorKind.CSS, value="button[type='submit']"),

    # Text scan over BUTTON_LIKE_SELECTOR (case-insensitive substring)
    SelectorStrategy(kind=SelectorKind.TEXT, value="confirm"),
    SelectorStrategy(kind=SelectorKind.TEXT, value="yes"),
)


# =============================================================================
# BROWSER PAGE SETUP
# =============================================================================

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

VIEWPORT = {"width": 1280, "height": 720}
