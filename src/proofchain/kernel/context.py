"""CI run context consumed by the payload builders.

Builders never read the environment themselves; the CLI loads a CIContext
once and passes it in, so every builder stays a pure function of its inputs.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from proofchain.errors import ConfigurationError

DEFAULT_SERVER_URL = "https://github.com"


def _parse_int(value: Optional[str], name: str) -> int:
    if not value:
        return 0
    try:
        return int(value, 10)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


class CIContext(BaseModel):
    """Facts about the triggering workflow run."""
    owner: str = ""
    repo: str = ""
    sha: str = ""
    ref: str = ""
    workflow: str = ""
    run_id: int = 0
    run_number: int = 0
    actor: str = ""
    event_name: str = ""
    server_url: str = DEFAULT_SERVER_URL
    event: Dict[str, Any] = Field(default_factory=dict)  # webhook payload of the triggering event

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CIContext":
        """Load the context from GitHub Actions environment variables.

        The webhook payload is read from the JSON file at GITHUB_EVENT_PATH.
        A missing file yields an empty payload; a file that is not valid JSON
        raises ConfigurationError.
        """
        env = os.environ if environ is None else environ

        owner, repo = "", ""
        repository = env.get("GITHUB_REPOSITORY", "")
        if repository:
            if "/" not in repository:
                raise ConfigurationError(
                    f"GITHUB_REPOSITORY must look like 'owner/repo', got {repository!r}"
                )
            owner, repo = repository.split("/", 1)

        event: Dict[str, Any] = {}
        event_path = env.get("GITHUB_EVENT_PATH")
        if event_path and Path(event_path).is_file():
            try:
                with open(event_path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Event payload at {event_path} is not valid JSON: {e}")
            if isinstance(loaded, dict):
                event = loaded

        return cls(
            owner=owner,
            repo=repo,
            sha=env.get("GITHUB_SHA", ""),
            ref=env.get("GITHUB_REF", ""),
            workflow=env.get("GITHUB_WORKFLOW", ""),
            run_id=_parse_int(env.get("GITHUB_RUN_ID"), "GITHUB_RUN_ID"),
            run_number=_parse_int(env.get("GITHUB_RUN_NUMBER"), "GITHUB_RUN_NUMBER"),
            actor=env.get("GITHUB_ACTOR", ""),
            event_name=env.get("GITHUB_EVENT_NAME", ""),
            server_url=(env.get("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL).rstrip("/"),
            event=event,
        )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def head_commit(self) -> Dict[str, Any]:
        head = self.event.get("head_commit")
        return head if isinstance(head, dict) else {}

    @property
    def commits(self) -> List[Dict[str, Any]]:
        commits = self.event.get("commits")
        if not isinstance(commits, list):
            return []
        return [c for c in commits if isinstance(c, dict)]

    @property
    def release(self) -> Optional[Dict[str, Any]]:
        release = self.event.get("release")
        return release if isinstance(release, dict) and release else None

    @property
    def commit_url(self) -> str:
        return f"{self.server_url}/{self.full_name}/commit/{self.sha}"

    @property
    def workflow_url(self) -> str:
        return f"{self.server_url}/{self.full_name}/actions/runs/{self.run_id}"
