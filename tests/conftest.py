"""Test fixtures for pytest."""

import json
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Generator
from unittest.mock import MagicMock, patch

import pytest

from auto_request_review.data_types import ActionInputs, PullRequestContext

CONFIG = {
    "reviewers": {
        "defaults": ["dr-mario"],
        "groups": {
            "mario-brothers": ["mario", "luigi"],
        },
    },
    "files": {
        "**/*.js": ["mario-brothers", "princess-peach"],
        "**/*.rb": ["wario", "waluigi"],
    },
    "options": {},
}

GROUPS_CONFIG = {
    "reviewers": {
        "defaults": ["dr-mario"],
        "groups": {
            "mario-brothers": ["mario", "dr-mario", "luigi"],
            "mario-alike": ["mario", "dr-mario", "wario"],
        },
    },
    "options": {
        "enable_group_assignment": True,
    },
}

PULL_REQUEST = {
    "number": 7,
    "title": "Nice Pull Request",
    "draft": False,
    "user": {"login": "luigi"},
    "requested_reviewers": [],
    "assignees": [],
}

CONTEXT = PullRequestContext(number=7, author="luigi", title="Nice Pull Request")


@pytest.fixture(scope="function")
def raw_config() -> Generator[Dict[str, Any], None, None]:
    """Provide a fresh copy of the files-based configuration."""
    yield deepcopy(CONFIG)


@pytest.fixture(scope="function")
def event_file(tmp_path: Path) -> Generator[Path, None, None]:
    """Write a pull_request event payload and provide its path."""
    path = tmp_path / "event.json"
    path.write_text(json.dumps({"pull_request": PULL_REQUEST}), encoding="utf-8")
    yield path


@pytest.fixture(scope="function")
def action_inputs(
    event_file: Path, tmp_path: Path
) -> Generator[ActionInputs, None, None]:
    """Provide action inputs pointing at the fake event and output files."""
    yield ActionInputs(
        token="token",
        repository="nintendo/castle",
        ref="refs/pull/7/merge",
        event_path=str(event_file),
        output_path=str(tmp_path / "output.txt"),
    )


@pytest.fixture(scope="function")
def mocked_pull_request() -> Generator[MagicMock, None, None]:
    """Provide a mocked pull request, as opened by get_pull_request."""
    with patch("scripts.request_reviews.get_pull_request") as mocked_get_pull_request:
        with mocked_get_pull_request() as mocked_pull_request:
            mocked_get_pull_request.reset_mock()
            yield mocked_pull_request
