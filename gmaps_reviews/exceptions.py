"""Custom exceptions for the gmaps-reviews library."""


class GMapsReviewsError(Exception):
    """Base exception for all gmaps-reviews errors."""
    pass


class ConfigurationError(GMapsReviewsError):
    """Raised when configuration is invalid or incomplete."""
    pass


class FetchError(GMapsReviewsError):
    """Raised when a page cannot be fetched (transport failure)."""

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url


class FetchTimeoutError(FetchError):
    """Raised when every attempt to fetch a page timed out."""
    pass


class HTTPStatusError(FetchError):
    """Raised when Google answers with a non-2xx status."""

    def __init__(self, status_code: int, url: str = None):
        super().__init__(f"Google returned HTTP {status_code}", url)
        self.status_code = status_code


class CaptchaError(FetchError):
    """Raised when Google serves a CAPTCHA / unusual-traffic page."""
    pass
