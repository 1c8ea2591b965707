"""
Exception types shared by the decoder, the HTTP client and the session.
"""

from typing import Optional


class ReaderError(Exception):
    """Base class for every failure the reader can display."""


class DecodeError(ReaderError):
    """The response body did not match the expected wire schema."""


class SchemaError(DecodeError):
    """A required field is missing or has the wrong type."""

    def __init__(self, field: str, detail: Optional[str] = None):
        self.field = field
        self.detail = detail
        message = f"Missing or invalid field: {field}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class UnrecognizedTextShape(DecodeError):
    """The text field is neither a word-object array nor a string."""

    def __init__(self, value_type: str):
        self.value_type = value_type
        super().__init__(f"Unrecognized text shape: {value_type}")


class TransportError(ReaderError):
    """The request could not be completed."""


class BadUrl(TransportError):
    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Bad URL: {url}")


class RequestTimeout(TransportError):
    def __init__(self, seconds: float):
        self.seconds = seconds
        super().__init__(f"Request timed out after {seconds}s")


class NetworkError(TransportError):
    pass


class BadStatus(TransportError):
    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Bad status: {status_code}")


class BadBody(TransportError):
    """The body arrived but could not be decoded."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Bad body: {message}")
