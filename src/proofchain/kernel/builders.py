"""Payload builders, one per attestation kind (pure logic).

Each builder takes the CI context as an explicit argument and returns one
AttestationPayload. The ``document_hash`` of each kind covers a fixed,
narrow subset of the data, serialized with a fixed key order:

- commit:   {"sha", "repo", "timestamp"}
- release:  {"tag", "repo", "created_at"}
- artifact: sorted concatenation of file fingerprints
- custom:   {"repo", "sha", "run_id", "custom"}

These bases are a wire contract with the verification service. Changing one
needs a new ``event_type``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from proofchain.codes import EventType
from proofchain.contracts import AttestationPayload, ArtifactDescriptor
from proofchain.errors import ArtifactNotFoundError, ConfigurationError, PreconditionError
from proofchain.kernel.artifacts import combine_hashes, describe_file, match_files
from proofchain.kernel.context import CIContext
from proofchain.kernel.hash_utils import CanonicalizationError, hash_json, ordered_dumps

logger = logging.getLogger(__name__)


def _utc_now_iso(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with milliseconds and a ``Z`` suffix."""
    moment = now or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _repository_fields(context: CIContext) -> Dict[str, Any]:
    return {
        "repository": context.repo,
        "owner": context.owner,
        "full_name": context.full_name,
    }


def _require_repository(context: CIContext) -> None:
    missing = [
        name for name, value in (("owner", context.owner), ("repo", context.repo), ("sha", context.sha))
        if not value
    ]
    if missing:
        raise ConfigurationError(
            f"Missing repository context: {', '.join(missing)}. "
            "Run inside a GitHub Actions workflow or set GITHUB_REPOSITORY and GITHUB_SHA."
        )


def build_commit_payload(
    context: CIContext,
    include_diff: bool = False,
    now: Optional[datetime] = None,
) -> AttestationPayload:
    """Build a commit attestation.

    Args:
        context: CI run context
        include_diff: Add a ``diff_hash`` over the head commit's file lists
        now: Clock override for the fallback commit timestamp

    Raises:
        ConfigurationError: If owner, repo or sha is missing
    """
    _require_repository(context)
    head = context.head_commit
    commits = context.commits
    author = head.get("author") if isinstance(head.get("author"), dict) else {}

    commit_message = head.get("message") or (commits[0].get("message") if commits else None) or ""

    data: Dict[str, Any] = {
        **_repository_fields(context),
        "commit_sha": context.sha,
        "commit_message": commit_message,
        "commit_author": author.get("name") or context.actor,
        "commit_email": author.get("email") or "",
        "commit_timestamp": head.get("timestamp") or _utc_now_iso(now),
        "ref": context.ref,
        "branch": context.ref.replace("refs/heads/", "", 1),
        "workflow": context.workflow,
        "run_id": context.run_id,
        "run_number": context.run_number,
        "commit_url": context.commit_url,
        "workflow_url": context.workflow_url,
    }

    if include_diff and head.get("id"):
        data["diff_hash"] = hash_json({
            "added": head.get("added") or [],
            "removed": head.get("removed") or [],
            "modified": head.get("modified") or [],
        })

    document_hash = hash_json({
        "sha": context.sha,
        "repo": context.full_name,
        "timestamp": data["commit_timestamp"],
    })

    return AttestationPayload(
        event_type=EventType.GITHUB_COMMIT.value,
        data=data,
        document_hash=document_hash,
    )


def build_release_payload(context: CIContext) -> AttestationPayload:
    """Build a release attestation from the release event payload.

    Raises:
        PreconditionError: If the triggering event carries no release
    """
    release = context.release
    if release is None:
        raise PreconditionError(
            "No release data found. This action should be triggered on release events."
        )

    author = release.get("author") if isinstance(release.get("author"), dict) else {}
    assets = release.get("assets")

    data: Dict[str, Any] = {
        **_repository_fields(context),
        "release_id": release.get("id"),
        "release_name": release.get("name") or release.get("tag_name"),
        "tag_name": release.get("tag_name"),
        "target_commitish": release.get("target_commitish"),
        "draft": release.get("draft"),
        "prerelease": release.get("prerelease"),
        "created_at": release.get("created_at"),
        "published_at": release.get("published_at"),
        "author": author.get("login") or context.actor,
        "body": release.get("body") or "",
        "html_url": release.get("html_url"),
        "tarball_url": release.get("tarball_url"),
        "zipball_url": release.get("zipball_url"),
        "assets_count": len(assets) if isinstance(assets, list) else 0,
    }

    document_hash = hash_json({
        "tag": release.get("tag_name"),
        "repo": context.full_name,
        "created_at": release.get("created_at"),
    })

    return AttestationPayload(
        event_type=EventType.GITHUB_RELEASE.value,
        data=data,
        document_hash=document_hash,
    )


def build_artifact_payload(
    context: CIContext,
    pattern: str,
    matcher: Callable[[str], List[str]] = match_files,
) -> AttestationPayload:
    """Build an artifact attestation over every file matching ``pattern``.

    Files are hashed in match order; the document hash is the combined hash,
    which does not depend on that order.

    Raises:
        ConfigurationError: If no pattern is given
        ArtifactNotFoundError: If the pattern matches nothing
    """
    if not pattern or not pattern.strip():
        raise ConfigurationError("artifact-path is required for artifact attestation")

    files = matcher(pattern)
    if not files:
        raise ArtifactNotFoundError(pattern)

    logger.info("Found %d file(s) to attest", len(files))

    artifacts: List[ArtifactDescriptor] = []
    for path in files:
        descriptor = describe_file(path)
        artifacts.append(descriptor)
        logger.info("  - %s: %s", descriptor.name, descriptor.hash)
        logger.debug("    path=%s size=%d", descriptor.path, descriptor.size)

    combined_hash = combine_hashes(a.hash for a in artifacts)

    data: Dict[str, Any] = {
        **_repository_fields(context),
        "commit_sha": context.sha,
        "ref": context.ref,
        "workflow": context.workflow,
        "run_id": context.run_id,
        "run_number": context.run_number,
        "artifacts": [a.to_wire() for a in artifacts],
        "artifact_count": len(artifacts),
        "combined_hash": combined_hash,
        "workflow_url": context.workflow_url,
    }

    return AttestationPayload(
        event_type=EventType.GITHUB_ARTIFACT.value,
        data=data,
        document_hash=combined_hash,
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_custom_data(custom_data: Optional[str]) -> Dict[str, Any]:
    """Parse the custom JSON object, degrading to ``{}`` with a warning.

    Values that parse but cannot be serialized into the hash basis, such as
    numbers that overflow to infinity, degrade the same way.
    """
    try:
        parsed = json.loads(custom_data or "", parse_constant=_reject_constant)
    except (ValueError, TypeError):
        logger.warning("Failed to parse custom-data as JSON, using empty object")
        return {}
    if not isinstance(parsed, dict):
        logger.warning(
            "custom-data must be a JSON object, got %s; using empty object",
            type(parsed).__name__,
        )
        return {}
    try:
        ordered_dumps(parsed).encode("utf-8")
    except (CanonicalizationError, UnicodeEncodeError) as e:
        logger.warning("custom-data cannot be hashed (%s); using empty object", e)
        return {}
    return parsed


def build_custom_payload(
    context: CIContext,
    event_type: str,
    custom_data: Optional[str],
) -> AttestationPayload:
    """Build a custom attestation.

    Custom fields are merged over the base context fields. The document hash
    binds the entire parsed custom object.

    Raises:
        ConfigurationError: If no event type is given
    """
    if not event_type or not event_type.strip():
        raise ConfigurationError("event-type is required for custom attestation")

    custom = parse_custom_data(custom_data)

    data: Dict[str, Any] = {
        **_repository_fields(context),
        "commit_sha": context.sha,
        "ref": context.ref,
        "workflow": context.workflow,
        "run_id": context.run_id,
        "actor": context.actor,
        "event_name": context.event_name,
    }
    data.update(custom)

    document_hash = hash_json({
        "repo": context.full_name,
        "sha": context.sha,
        "run_id": context.run_id,
        "custom": custom,
    })

    return AttestationPayload(
        event_type=event_type,
        data=data,
        document_hash=document_hash,
    )
