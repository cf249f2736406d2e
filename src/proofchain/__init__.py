"""proofchain: content-addressed supply-chain attestations for CI runs."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("proofchain-attest")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from proofchain.api import build_payload, run_attestation
from proofchain.client import AttestationClient
from proofchain.codes import AttestationKind, AttestationStatus, EndpointStyle
from proofchain.config import ActionConfig
from proofchain.contracts import (
    ArtifactDescriptor,
    AttestationOutputs,
    AttestationPayload,
    AttestationResponse,
)
from proofchain.errors import (
    ArtifactNotFoundError,
    AttestationError,
    ConfigurationError,
    ConfirmationTimeoutError,
    PreconditionError,
    TransportError,
)
from proofchain.kernel.context import CIContext

__all__ = [
    "__version__",
    "build_payload",
    "run_attestation",
    "AttestationClient",
    "AttestationKind",
    "AttestationStatus",
    "EndpointStyle",
    "ActionConfig",
    "ArtifactDescriptor",
    "AttestationOutputs",
    "AttestationPayload",
    "AttestationResponse",
    "ArtifactNotFoundError",
    "AttestationError",
    "ConfigurationError",
    "ConfirmationTimeoutError",
    "PreconditionError",
    "TransportError",
    "CIContext",
]
