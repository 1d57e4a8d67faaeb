"""Exception hierarchy for safedom.

Configuration and resolution failures are raised to the caller. Validator
rejections and empty inputs are ordinary control flow and never raise.
"""


class SafeDomError(Exception):
    """Base exception for all safedom errors."""

    pass


class ConfigurationError(SafeDomError):
    """Raised when a redaction rule or configuration value is invalid."""

    pass


class NotFoundError(SafeDomError):
    """Raised when a root reference does not resolve to a node."""

    pass
