"""
Exception types raised by orsr_parser.
"""


class OrsrError(Exception):
    """Base class for all orsr_parser errors."""


class MarkupError(OrsrError):
    """The page could not be turned into a usable document tree."""

    def __init__(self, message: str, diagnostics: list[str] | None = None):
        super().__init__(message)
        self.diagnostics = list(diagnostics or [])

    def __str__(self) -> str:
        base = super().__str__()
        if not self.diagnostics:
            return base
        return f"{base} ({'; '.join(self.diagnostics[:5])})"


class FetchError(OrsrError):
    """A page could not be downloaded from the register."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class InvalidIdentifierError(OrsrError, ValueError):
    """A structurally required identifier (entity ID, court ID) is malformed."""


class OutputFormatError(OrsrError, ValueError):
    """Requested output format is not supported."""


class SerializationError(OrsrError):
    """A record cannot be rendered in the requested format."""
