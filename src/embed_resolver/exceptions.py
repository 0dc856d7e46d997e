"""Custom exceptions for Embed Resolver."""


class EmbedResolverError(Exception):
    """Base exception for all Embed Resolver errors."""

    pass


# ─── Resolution Errors ───────────────────────────────────────────


class ResolutionError(EmbedResolverError):
    """Base exception for failures while resolving a URL."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        self.message = message
        super().__init__(f"[{url}] {message}")


class MalformedInputError(ResolutionError):
    """Raised when a URL does not carry the identifier a resolver needs."""

    def __init__(self, url: str, reason: str = "URL does not match the expected pattern") -> None:
        super().__init__(url, reason)


class UpstreamUnavailableError(ResolutionError):
    """Raised when a remote API answers with a non-2xx status or cannot be reached."""

    def __init__(self, url: str, status_code: int | None, reason: str) -> None:
        self.status_code = status_code
        if status_code is None:
            message = f"Upstream unavailable: {reason}"
        else:
            message = f"Upstream error {status_code}: {reason}"
        super().__init__(url, message)


class UpstreamEmptyError(ResolutionError):
    """Raised when a remote call succeeded but returned nothing usable."""

    def __init__(self, url: str, reason: str = "No usable content") -> None:
        super().__init__(url, reason)


class ProviderNotConfiguredError(EmbedResolverError):
    """Raised when a provider is not configured (missing credential)."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"[{provider}] Provider is not configured (missing credential)")


# ─── Writer Errors ───────────────────────────────────────────────


class WriterDisposedError(EmbedResolverError):
    """Raised when a response writer is used after it was closed."""

    def __init__(self, writer: str) -> None:
        self.writer = writer
        super().__init__(f"{writer} has been disposed")


# ─── Validation Errors ───────────────────────────────────────────


class ValidationError(EmbedResolverError):
    """Raised when input validation fails."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"Validation error for '{field}': {message}")


class InvalidURLError(ValidationError):
    """Raised when a URL is invalid."""

    def __init__(self, url: str, reason: str = "Invalid URL format") -> None:
        self.url = url
        super().__init__("url", f"{reason}: {url}")


class UnsupportedFormatError(ValidationError):
    """Raised when a response format other than json or xml is requested."""

    def __init__(self, format: str) -> None:
        self.format = format
        super().__init__("format", f"Unsupported response format: {format}")
