"""Public data models exchanged with the attestation service."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

from proofchain.kernel.hash_utils import ordered_dumps


class AttestationPayload(BaseModel):
    """Outbound record: one per run."""
    event_type: str  # "github_commit" | "github_release" | "github_artifact" | custom name
    data: Dict[str, Any] = Field(default_factory=dict)  # flat descriptive facts
    document_hash: Optional[str] = None  # fingerprint over the kind's hash basis

    def to_wire(self) -> Dict[str, Any]:
        """Request body as a dict, omitting an absent document hash."""
        body: Dict[str, Any] = {"event_type": self.event_type, "data": self.data}
        if self.document_hash is not None:
            body["document_hash"] = self.document_hash
        return body

    def to_json(self) -> str:
        return ordered_dumps(self.to_wire())


class AttestationResponse(BaseModel):
    """Inbound record returned on submission and lookup."""
    certificate_id: str
    document_hash: str = ""
    ipfs_hash: str = ""
    verification_url: str = ""
    status: str = ""  # "pending" | "confirmed" | ...
    tx_hash: Optional[str] = None  # set once status == "confirmed"

    model_config = ConfigDict(extra="ignore")


class ArtifactDescriptor(BaseModel):
    """A matched artifact file. ``path`` is kept for logging only."""
    name: str
    path: str
    size: int = Field(ge=0)
    hash: str

    def to_wire(self) -> Dict[str, Any]:
        return {"name": self.name, "size": self.size, "hash": self.hash}


class AttestationOutputs(BaseModel):
    """Fields published for downstream steps after a successful run."""
    kind: str
    certificate_id: str
    document_hash: Optional[str] = None
    verification_url: str
    ipfs_hash: str
    status: str
    tx_hash: Optional[str] = None
