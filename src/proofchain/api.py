"""Public API for proofchain.

High-level functions that turn a configuration and a CI context into a
submitted attestation. The CLI is a thin wrapper around run_attestation().
"""

import logging
from typing import Optional

from proofchain.client import AttestationClient
from proofchain.codes import AttestationKind
from proofchain.config import ActionConfig
from proofchain.contracts import AttestationOutputs, AttestationPayload
from proofchain.errors import ConfigurationError
from proofchain.kernel.builders import (
    build_artifact_payload,
    build_commit_payload,
    build_custom_payload,
    build_release_payload,
)
from proofchain.kernel.context import CIContext

logger = logging.getLogger(__name__)


def resolve_kind(attestation_type: str) -> AttestationKind:
    """Map the ``type`` input to a kind.

    Raises:
        ConfigurationError: If the type is not a known kind
    """
    try:
        return AttestationKind(attestation_type)
    except ValueError:
        raise ConfigurationError(f"Unknown attestation type: {attestation_type}") from None


def build_payload(config: ActionConfig, context: CIContext) -> AttestationPayload:
    """Build the payload for the configured attestation kind."""
    kind = resolve_kind(config.attestation_type)

    if kind is AttestationKind.COMMIT:
        logger.info("Attesting commit...")
        return build_commit_payload(context, include_diff=config.include_diff)
    if kind is AttestationKind.RELEASE:
        logger.info("Attesting release...")
        return build_release_payload(context)
    if kind is AttestationKind.ARTIFACT:
        logger.info("Attesting artifact(s)...")
        return build_artifact_payload(context, config.artifact_path)
    logger.info("Creating custom attestation...")
    return build_custom_payload(context, config.event_type, config.custom_data)


def make_client(config: ActionConfig) -> AttestationClient:
    return AttestationClient(
        config.api_url,
        config.api_key,
        endpoint_style=config.endpoint_style,
        request_timeout=config.request_timeout,
        poll_interval=config.poll_interval,
    )


def run_attestation(
    config: ActionConfig,
    context: CIContext,
    client: Optional[AttestationClient] = None,
) -> AttestationOutputs:
    """Build, submit and optionally confirm one attestation.

    Submits exactly once. Polls at most once, only when
    ``config.wait_for_confirmation`` is set and submission succeeded.

    Args:
        config: Validated inputs
        context: CI run context
        client: Client override (default: built from config)

    Returns:
        The fields to publish for downstream steps

    Raises:
        AttestationError: From any stage; nothing is published by this function
    """
    logger.info("ProofChain Attestation")
    logger.info("   Type: %s", config.attestation_type)
    logger.info("   API URL: %s", config.api_url)

    payload = build_payload(config, context)
    logger.info("   Document Hash: %s", payload.document_hash)

    client = client or make_client(config)

    logger.info("Submitting attestation to ProofChain...")
    result = client.submit(payload)
    logger.info("Attestation created!")
    logger.info("   Certificate ID: %s", result.certificate_id)
    logger.info("   IPFS Hash: %s", result.ipfs_hash)

    if config.wait_for_confirmation:
        logger.info("Waiting for blockchain confirmation...")
        result = client.await_confirmation(result.certificate_id, deadline=config.confirmation_timeout)
        logger.info("Blockchain TX: %s", result.tx_hash)

    return AttestationOutputs(
        kind=config.attestation_type,
        certificate_id=result.certificate_id,
        document_hash=payload.document_hash,
        verification_url=result.verification_url,
        ipfs_hash=result.ipfs_hash,
        status=result.status,
        tx_hash=result.tx_hash,
    )
