"""
Storygrid Custom Exceptions

Custom exception classes for error handling throughout Storygrid.
"""


class StorygridError(Exception):
    """Base exception for all Storygrid errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(StorygridError):
    """Raised when there's an issue with configuration."""
    pass


class MissingConfigError(ConfigurationError):
    """Raised when a required configuration is missing."""
    pass


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is invalid."""
    pass


# =============================================================================
# STORYBOARD ERRORS
# =============================================================================

class StoryboardError(StorygridError):
    """Base exception for storyboard orchestration errors."""
    pass


class NoResultError(StoryboardError):
    """Raised when an operation needs a storyboard but none was generated."""

    def __init__(self, operation: str):
        message = f"No storyboard available for '{operation}'; generate one first"
        super().__init__(message, {"operation": operation})


# =============================================================================
# LLM ERRORS
# =============================================================================

class LLMError(StorygridError):
    """Base exception for LLM-related errors."""
    pass


class ServiceError(LLMError):
    """Raised when the call to the generative model service fails."""

    def __init__(self, provider: str, reason: str, status_code: int = None):
        message = f"LLM provider '{provider}' error: {reason}"
        details = {"provider": provider, "reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.provider = provider
        self.status_code = status_code


class RateLimitError(ServiceError):
    """Raised when the provider rejects the call for quota reasons."""
    pass


class ServiceTimeoutError(ServiceError):
    """Raised when the provider does not answer in time."""
    pass


class ContentBlockedError(ServiceError):
    """Raised when content is blocked by provider's safety filters."""

    def __init__(self, provider: str, reason: str):
        super().__init__(provider, f"content blocked: {reason}")
        self.is_content_block = True


class ParseError(LLMError):
    """Raised when a model reply cannot be decoded as structured data."""

    def __init__(self, reason: str, raw: str = None):
        details = {"reason": reason}
        if raw is not None:
            details["raw"] = raw[:200]
        super().__init__(f"Could not parse model response: {reason}", details)
        self.raw = raw
