"""HTTP client for the attestation service: submission and confirmation polling."""

import logging
import time
from typing import Callable, Dict, Optional

import requests
from pydantic import ValidationError

from proofchain.codes import AttestationStatus, EndpointStyle
from proofchain.contracts import AttestationPayload, AttestationResponse
from proofchain.errors import ConfirmationTimeoutError, TransportError

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_CONFIRMATION_DEADLINE = 120.0

_ENDPOINT_PATHS = {
    EndpointStyle.INGEST: "/events/ingest",
    EndpointStyle.LEGACY: "/events",
}


def _is_success(response) -> bool:
    return 200 <= response.status_code < 300


class AttestationClient:
    """Synchronous client for one attestation service.

    Two generations of the service API accept submissions on different
    paths; ``endpoint_style`` selects which one this client talks to.
    Lookups use ``/events/{certificate_id}`` on both.

    ``sleep`` and ``clock`` are injectable so polling can run without
    real waits.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        endpoint_style: EndpointStyle = EndpointStyle.INGEST,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.endpoint_style = EndpointStyle(endpoint_style)
        self.request_timeout = request_timeout
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._clock = clock

    @property
    def endpoint_path(self) -> str:
        return _ENDPOINT_PATHS[self.endpoint_style]

    @property
    def submit_url(self) -> str:
        return f"{self.api_url}{self.endpoint_path}"

    def lookup_url(self, certificate_id: str) -> str:
        return f"{self.api_url}/events/{certificate_id}"

    def _headers(self, json_body: bool = False) -> Dict[str, str]:
        headers = {API_KEY_HEADER: self.api_key}
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def submit(self, payload: AttestationPayload) -> AttestationResponse:
        """Send one attestation. Not retried.

        Raises:
            TransportError: On a non-success status, a connection failure,
                or a response body that is not an attestation record
        """
        url = self.submit_url
        logger.debug("POST %s (%s endpoint)", url, self.endpoint_style.value)
        try:
            response = requests.post(
                url,
                data=payload.to_json().encode("utf-8"),
                headers=self._headers(json_body=True),
                timeout=self.request_timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"API request failed: {e}") from e

        if not _is_success(response):
            raise TransportError.from_status(response.status_code, response.text)

        try:
            return AttestationResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise TransportError(
                f"API returned an invalid attestation response: {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e

    def fetch(self, certificate_id: str) -> Optional[AttestationResponse]:
        """Look up a record once. Returns None on any transient failure."""
        url = self.lookup_url(certificate_id)
        try:
            response = requests.get(url, headers=self._headers(), timeout=self.request_timeout)
        except requests.RequestException as e:
            logger.debug("Lookup of %s failed: %s", certificate_id, e)
            return None

        if not _is_success(response):
            logger.debug("Lookup of %s returned %s", certificate_id, response.status_code)
            return None

        try:
            return AttestationResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.debug("Lookup of %s returned an unreadable body: %s", certificate_id, e)
            return None

    def await_confirmation(
        self,
        certificate_id: str,
        deadline: float = DEFAULT_CONFIRMATION_DEADLINE,
    ) -> AttestationResponse:
        """Poll until the record is confirmed with a transaction hash.

        Polls at a fixed interval; failed lookups count as pending.

        Raises:
            ConfirmationTimeoutError: If ``deadline`` seconds pass first
        """
        start = self._clock()
        attempts = 0
        while self._clock() - start < deadline:
            attempts += 1
            record = self.fetch(certificate_id)
            if record is not None:
                if record.status == AttestationStatus.CONFIRMED.value and record.tx_hash:
                    logger.debug("Confirmed after %d lookup(s)", attempts)
                    return record
                logger.debug("Status %r after %d lookup(s)", record.status, attempts)
            self._sleep(self.poll_interval)

        raise ConfirmationTimeoutError("Timeout waiting for blockchain confirmation")

