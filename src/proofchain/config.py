"""Action inputs.

Inputs arrive the way GitHub Actions passes them to a step: one environment
variable per input named ``INPUT_<NAME>``, upper-cased, spaces replaced by
underscores, hyphens kept (``api-key`` -> ``INPUT_API-KEY``).
"""

import os
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from proofchain.client import (
    DEFAULT_CONFIRMATION_DEADLINE,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
)
from proofchain.codes import AttestationKind, EndpointStyle
from proofchain.errors import ConfigurationError

DEFAULT_API_URL = "https://ingest.proofchain.dev"
API_KEY_FALLBACK_ENV = "PROOFCHAIN_API_KEY"

# input name -> ActionConfig field
INPUT_FIELDS = {
    "api-key": "api_key",
    "api-url": "api_url",
    "type": "attestation_type",
    "artifact-path": "artifact_path",
    "event-type": "event_type",
    "custom-data": "custom_data",
    "include-diff": "include_diff",
    "wait-for-confirmation": "wait_for_confirmation",
    "endpoint-style": "endpoint_style",
    "confirmation-timeout": "confirmation_timeout",
    "poll-interval": "poll_interval",
    "request-timeout": "request_timeout",
}

BOOLEAN_INPUTS = {"include-diff", "wait-for-confirmation"}


def input_env_name(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str, environ: Optional[Mapping[str, str]] = None, required: bool = False) -> str:
    """Read one action input, trimmed. Empty when unset.

    Raises:
        ConfigurationError: If ``required`` and the input is empty
    """
    env = os.environ if environ is None else environ
    value = env.get(input_env_name(name), "").strip()
    if required and not value:
        raise ConfigurationError(f"Input required and not supplied: {name}")
    return value


class ActionConfig(BaseModel):
    """Validated inputs for one attestation run."""
    api_key: str = Field(min_length=1, repr=False)
    api_url: str = DEFAULT_API_URL
    attestation_type: str = AttestationKind.COMMIT.value  # validated at dispatch
    artifact_path: str = ""
    event_type: str = ""
    custom_data: str = ""
    include_diff: bool = False
    wait_for_confirmation: bool = False
    endpoint_style: EndpointStyle = EndpointStyle.INGEST
    confirmation_timeout: float = Field(default=DEFAULT_CONFIRMATION_DEADLINE, gt=0)
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, ge=0)
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_values(cls, values: Dict[str, Any]) -> "ActionConfig":
        """Validate raw values, turning validation failures into ConfigurationError."""
        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {problems}") from e

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ActionConfig":
        """Load inputs from the environment, then apply non-None overrides.

        Boolean inputs are true only for the exact string ``true``. Unset
        inputs keep their defaults. The API key falls back to
        PROOFCHAIN_API_KEY when no ``api-key`` input is present.
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for name, field_name in INPUT_FIELDS.items():
            raw = get_input(name, env)
            if name in BOOLEAN_INPUTS:
                values[field_name] = raw == "true"
            elif raw:
                values[field_name] = raw

        if not values.get("api_key"):
            fallback = env.get(API_KEY_FALLBACK_ENV, "").strip()
            if not fallback:
                raise ConfigurationError("Input required and not supplied: api-key")
            values["api_key"] = fallback

        for key, value in (overrides or {}).items():
            if value is not None:
                values[key] = value

        return cls.from_values(values)
