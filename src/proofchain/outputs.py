"""Publishing run results to the CI runner.

Outputs go to the file named by GITHUB_OUTPUT, the job summary to the file
named by GITHUB_STEP_SUMMARY. Outside a runner both fall back to stdout.
"""

import os
import sys
import uuid
from typing import List, Mapping, Optional, TextIO, Tuple

from proofchain.contracts import AttestationOutputs


def _escape_command_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class OutputPublisher:
    """Writes step outputs, the job summary and the failure annotation."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None, stream: Optional[TextIO] = None):
        self.environ = os.environ if environ is None else environ
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def set_output(self, name: str, value: str) -> None:
        """Set one step output."""
        output_file = self.environ.get("GITHUB_OUTPUT")
        if output_file:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            if delimiter in name or delimiter in value:
                raise ValueError("Output name or value contains the generated delimiter")
            with open(output_file, "a", encoding="utf-8") as f:
                f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            print(f"{name}={value}", file=self.stream)

    def publish(self, outputs: AttestationOutputs) -> None:
        """Set the result outputs. ``tx-hash`` only when present."""
        self.set_output("certificate-id", outputs.certificate_id)
        self.set_output("document-hash", outputs.document_hash or "")
        self.set_output("verification-url", outputs.verification_url)
        self.set_output("ipfs-hash", outputs.ipfs_hash)
        if outputs.tx_hash:
            self.set_output("tx-hash", outputs.tx_hash)

    def write_summary(self, outputs: AttestationOutputs) -> Optional[str]:
        """Append a markdown summary of the run to the job summary file.

        Returns:
            The rendered markdown, or None when no summary file is configured
        """
        summary_file = self.environ.get("GITHUB_STEP_SUMMARY")
        if not summary_file:
            return None
        markdown = render_summary(outputs)
        with open(summary_file, "a", encoding="utf-8") as f:
            f.write(markdown)
        return markdown

    def set_failed(self, message: str) -> None:
        """Emit the error annotation that marks the step as failed."""
        print(f"::error::{_escape_command_data(message)}", file=self.stream)


def render_summary(outputs: AttestationOutputs) -> str:
    rows: List[Tuple[str, str]] = [
        ("Type", outputs.kind),
        ("Certificate ID", outputs.certificate_id),
        ("Document Hash", outputs.document_hash or "N/A"),
        ("IPFS Hash", outputs.ipfs_hash),
        ("Status", outputs.status),
    ]
    if outputs.tx_hash:
        rows.append(("TX Hash", outputs.tx_hash))

    lines = [
        "## ProofChain Attestation",
        "",
        "| Property | Value |",
        "| --- | --- |",
    ]
    for key, value in rows:
        lines.append(f"| {key} | {value.replace('|', '&#124;')} |")
    lines.append("")
    lines.append(f"[Verify Attestation]({outputs.verification_url})")
    lines.append("")
    return "\n".join(lines) + "\n"
