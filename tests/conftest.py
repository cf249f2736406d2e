"""Pytest configuration for tests.

No sys.path hacks - tests should import from the installed proofchain package.
"""

import json
import logging
from pathlib import Path

import pytest

from proofchain.kernel.context import CIContext


@pytest.fixture(autouse=True)
def _isolate_runner_env(monkeypatch):
    """Keep the real runner environment out of every test."""
    for name in ("GITHUB_OUTPUT", "GITHUB_STEP_SUMMARY", "GITHUB_EVENT_PATH", "PROOFCHAIN_API_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def push_event():
    return {
        "head_commit": {
            "id": "abc123",
            "message": "Fix widget alignment",
            "timestamp": "2024-01-01T00:00:00Z",
            "author": {"name": "Ada Lovelace", "email": "ada@example.com"},
            "added": ["src/new.py"],
            "removed": [],
            "modified": ["README.md", "src/widget.py"],
        },
        "commits": [{"id": "abc123", "message": "Fix widget alignment"}],
    }


@pytest.fixture
def context(push_event):
    return CIContext(
        owner="acme",
        repo="widget",
        sha="abc123",
        ref="refs/heads/main",
        workflow="CI",
        run_id=4242,
        run_number=17,
        actor="octocat",
        event_name="push",
        event=push_event,
    )


@pytest.fixture
def release_event():
    return {
        "release": {
            "id": 99,
            "name": "Widget 1.2.0",
            "tag_name": "v1.2.0",
            "target_commitish": "main",
            "draft": False,
            "prerelease": False,
            "created_at": "2024-02-01T10:00:00Z",
            "published_at": "2024-02-01T10:05:00Z",
            "author": {"login": "release-bot"},
            "body": "Changelog",
            "html_url": "https://github.com/acme/widget/releases/tag/v1.2.0",
            "tarball_url": "https://api.github.com/repos/acme/widget/tarball/v1.2.0",
            "zipball_url": "https://api.github.com/repos/acme/widget/zipball/v1.2.0",
            "assets": [{"id": 1}, {"id": 2}],
        }
    }


@pytest.fixture
def runner_env(tmp_path, push_event):
    """Environment of a push-triggered workflow step."""
    event_path = tmp_path / "event.json"
    event_path.write_text(json.dumps(push_event), encoding="utf-8")
    return {
        "GITHUB_REPOSITORY": "acme/widget",
        "GITHUB_SHA": "abc123",
        "GITHUB_REF": "refs/heads/main",
        "GITHUB_WORKFLOW": "CI",
        "GITHUB_RUN_ID": "4242",
        "GITHUB_RUN_NUMBER": "17",
        "GITHUB_ACTOR": "octocat",
        "GITHUB_EVENT_NAME": "push",
        "GITHUB_EVENT_PATH": str(event_path),
        "INPUT_API-KEY": "secret-key",
    }


class FakeResponse:
    """Stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else (json.dumps(payload) if payload is not None else "")

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def write_files(root: Path, files: dict) -> None:
    for rel, content in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(content)


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def make_files():
    return write_files


@pytest.fixture(autouse=True)
def _reset_proofchain_logger():
    """Undo CLI logging setup so caplog sees records in later tests."""
    yield
    logger = logging.getLogger("proofchain")
    logger.handlers[:] = []
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
