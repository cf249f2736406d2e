"""Error taxonomy for attestation runs.

Every failure a run can end with derives from AttestationError, so the CLI
boundary can catch it once and report the message verbatim.
"""

from typing import Optional


class AttestationError(Exception):
    """Base class for attestation failures."""
    pass


class ConfigurationError(AttestationError, ValueError):
    """Missing or invalid input (unknown kind, absent kind-specific input)."""
    pass


class PreconditionError(AttestationError):
    """The triggering event lacks something the requested kind needs."""
    pass


class ArtifactNotFoundError(PreconditionError):
    """The artifact pattern matched no files."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"No files found matching pattern: {pattern}")


class TransportError(AttestationError):
    """The attestation service rejected or failed a request."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @classmethod
    def from_status(cls, status_code: int, body: str) -> "TransportError":
        return cls(
            f"API request failed: {status_code} - {body}",
            status_code=status_code,
            body=body,
        )


class ConfirmationTimeoutError(AttestationError, TimeoutError):
    """The record was not confirmed before the deadline."""
    pass
