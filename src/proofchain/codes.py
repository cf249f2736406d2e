"""Enumerated constants for proofchain.

These constants prevent stringly-typed kinds and states and ensure
client code uses the values the attestation service understands.
"""

from enum import Enum


class AttestationKind(str, Enum):
    """Attestation kinds selectable with the ``type`` input."""

    COMMIT = "commit"
    RELEASE = "release"
    ARTIFACT = "artifact"
    CUSTOM = "custom"


class EventType(str, Enum):
    """``event_type`` values sent for the built-in kinds.

    The hash basis of each is a fixed wire contract; changing one requires a
    new event type.
    """

    GITHUB_COMMIT = "github_commit"
    GITHUB_RELEASE = "github_release"
    GITHUB_ARTIFACT = "github_artifact"


class EndpointStyle(str, Enum):
    """Which generation of the service API receives submissions."""

    INGEST = "ingest"  # POST {base}/events/ingest
    LEGACY = "legacy"  # POST {base}/events


class AttestationStatus(str, Enum):
    """Lifecycle labels reported by the service."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
