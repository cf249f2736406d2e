"""ProofChain CLI: attest the current CI event."""

import argparse
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from typing import List, Optional

from proofchain.api import run_attestation
from proofchain.codes import AttestationKind, EndpointStyle
from proofchain.config import ActionConfig
from proofchain.errors import AttestationError
from proofchain.kernel.context import CIContext
from proofchain.outputs import OutputPublisher

logger = logging.getLogger(__name__)


class ActionsFormatter(logging.Formatter):
    """Render warnings and errors as workflow annotations."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.ERROR:
            return f"::error::{message}"
        if record.levelno >= logging.WARNING:
            return f"::warning::{message}"
        if record.levelno <= logging.DEBUG:
            return f"::debug::{message}"
        return message


def configure_logging(quiet: bool = False, verbose: bool = False) -> None:
    level = logging.WARNING if quiet else (logging.DEBUG if verbose else logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ActionsFormatter("%(message)s"))
    root = logging.getLogger("proofchain")
    root.handlers[:] = [handler]
    root.setLevel(level)
    root.propagate = False


def build_parser() -> argparse.ArgumentParser:
    try:
        proofchain_version = get_version("proofchain-attest")
    except PackageNotFoundError:
        proofchain_version = "dev"

    parser = argparse.ArgumentParser(
        prog="proofchain-attest",
        description=(
            "Submit a content-addressed attestation for the current commit, release, "
            "build artifacts or a custom event. Inputs are read from INPUT_* environment "
            "variables; flags override them. The API key is read only from the environment."
        ),
    )
    parser.add_argument("--version", action="version", version=f"proofchain-attest {proofchain_version}")
    parser.add_argument(
        "--type",
        dest="attestation_type",
        choices=[k.value for k in AttestationKind],
        default=None,
        help="Attestation kind (default: commit)"
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="Attestation service base URL"
    )
    parser.add_argument(
        "--endpoint-style",
        choices=[s.value for s in EndpointStyle],
        default=None,
        help="Submission endpoint generation: ingest (/events/ingest) or legacy (/events)"
    )
    parser.add_argument(
        "--artifact-path",
        default=None,
        help="Glob pattern(s) of files to attest (artifact kind)"
    )
    parser.add_argument(
        "--event-type",
        default=None,
        help="Event type name (custom kind)"
    )
    parser.add_argument(
        "--custom-data",
        default=None,
        help="JSON object merged into the record (custom kind)"
    )
    parser.add_argument(
        "--include-diff",
        action="store_true",
        default=None,
        help="Add a hash of the head commit's changed file lists (commit kind)"
    )
    parser.add_argument(
        "--wait-for-confirmation",
        action="store_true",
        default=None,
        help="Poll until the record is anchored on the ledger"
    )
    parser.add_argument(
        "--confirmation-timeout",
        type=float,
        default=None,
        help="Seconds to wait for confirmation (default: 120)"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log request and polling details."
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(quiet=args.quiet, verbose=args.verbose)
    publisher = OutputPublisher()

    overrides = {
        "attestation_type": args.attestation_type,
        "api_url": args.api_url,
        "endpoint_style": args.endpoint_style,
        "artifact_path": args.artifact_path,
        "event_type": args.event_type,
        "custom_data": args.custom_data,
        "include_diff": args.include_diff,
        "wait_for_confirmation": args.wait_for_confirmation,
        "confirmation_timeout": args.confirmation_timeout,
    }

    try:
        config = ActionConfig.from_env(overrides=overrides)
        context = CIContext.from_env()
        outputs = run_attestation(config, context)
        publisher.publish(outputs)
    except AttestationError as e:
        publisher.set_failed(str(e))
        sys.exit(1)
    except Exception as e:
        publisher.set_failed(f"An unexpected error occurred: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)

    try:
        publisher.write_summary(outputs)
    except OSError as e:
        logger.warning("Failed to write job summary: %s", e)

    if not args.quiet:
        print("[OK] Attestation complete")
        print(f"  Certificate ID: {outputs.certificate_id}")
        print(f"  Status: {outputs.status}")
        print(f"  Verify at: {outputs.verification_url}")
    sys.exit(0)


if __name__ == "__main__":
    main()
