"""
Tests for loading the configuration file, locally and from GitHub.
"""

from dataclasses import replace
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from github import GithubException, UnknownObjectException

from auto_request_review.config_loader import (
    ConfigurationNotFound,
    apply_input_overrides,
    fetch_config,
    parse_config,
    read_local_config,
)
from auto_request_review.data_types import ActionInputs

YAML_CONFIG = """
reviewers:
  defaults:
    - dr-mario
  groups:
    mario-brothers:
      - mario
      - luigi
files:
  '**/*.js':
    - mario-brothers
    - princess-peach
options:
  ignore_draft: true
  ignored_keywords:
    - DO NOT REVIEW
  number_of_reviewers: 3
"""


def test_read_local_config(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yml"
    config_file.write_text(YAML_CONFIG, encoding="utf-8")
    assert read_local_config(str(config_file)) == YAML_CONFIG


@pytest.mark.parametrize(
    "content",
    [None, "", "   \n"],
    ids=["Missing file", "Empty file", "Blank file"],
)
def test_read_local_config_not_found(tmp_path: Path, content) -> None:
    config_file = tmp_path / "config.yml"
    if content is not None:
        config_file.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationNotFound):
        read_local_config(str(config_file))


def test_parse_config_non_mapping_is_empty() -> None:
    assert parse_config("- just\n- a list\n") == {}
    assert parse_config("") == {}
    assert parse_config(YAML_CONFIG)["options"]["number_of_reviewers"] == 3


def test_apply_input_overrides() -> None:
    inputs = ActionInputs(
        token="t", number_of_reviewers="1", ignored_reviewers="wario,waluigi"
    )
    raw = {"options": {"number_of_reviewers": 3, "ignore_draft": True}}

    overridden = apply_input_overrides(raw, inputs)

    assert overridden["options"] == {
        "number_of_reviewers": "1",
        "ignore_draft": True,
        "ignored_reviewers": "wario,waluigi",
    }
    # The parsed document is left untouched
    assert raw["options"]["number_of_reviewers"] == 3


def test_apply_input_overrides_creates_options() -> None:
    inputs = ActionInputs(token="t", number_of_assignees="2")
    assert apply_input_overrides({"options": None}, inputs) == {
        "options": {"number_of_assignees": "2"}
    }
    assert apply_input_overrides({}, ActionInputs(token="t")) == {"options": {}}


def test_fetch_config_local(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yml"
    config_file.write_text(YAML_CONFIG, encoding="utf-8")
    inputs = ActionInputs(
        token="", config_path=str(config_file), use_local=True, number_of_reviewers="2"
    )

    config = fetch_config(inputs)

    assert config.reviewers.defaults == ("dr-mario",)
    assert config.reviewers.groups == {"mario-brothers": frozenset(("mario", "luigi"))}
    assert config.files == {"**/*.js": ("mario-brothers", "princess-peach")}
    assert config.options.ignore_draft is True
    assert config.options.ignored_keywords == ("DO NOT REVIEW",)
    assert config.options.number_of_reviewers == 2


@patch("auto_request_review.config_loader.get_remote_repository")
def test_fetch_config_remote(mock_get_remote_repository: MagicMock) -> None:
    mock_repository = MagicMock()
    mock_repository.get_contents.return_value.decoded_content = YAML_CONFIG.encode()
    mock_get_remote_repository.return_value.__enter__.return_value = mock_repository
    inputs = ActionInputs(
        token="t",
        config_path=".github/reviewers.yml",
        repository="nintendo/castle",
        ref="refs/pull/7/merge",
    )

    config = fetch_config(inputs)

    mock_get_remote_repository.assert_called_once_with(inputs)
    mock_repository.get_contents.assert_called_once_with(
        ".github/reviewers.yml", ref="refs/pull/7/merge"
    )
    assert config.options.number_of_reviewers == 3


@patch("auto_request_review.config_loader.get_remote_repository")
def test_fetch_config_remote_not_found(mock_get_remote_repository: MagicMock) -> None:
    mock_repository = MagicMock()
    mock_repository.get_contents.side_effect = UnknownObjectException(404, {}, {})
    mock_get_remote_repository.return_value.__enter__.return_value = mock_repository

    with pytest.raises(ConfigurationNotFound):
        fetch_config(ActionInputs(token="t", repository="nintendo/castle"))

    mock_repository.get_contents.assert_called_once_with(
        ".github/auto_request_review.yml"
    )


@patch("auto_request_review.config_loader.get_remote_repository")
def test_fetch_config_remote_failure_propagates(
    mock_get_remote_repository: MagicMock,
) -> None:
    mock_repository = MagicMock()
    mock_repository.get_contents.side_effect = GithubException(500, {}, {})
    mock_get_remote_repository.return_value.__enter__.return_value = mock_repository
    inputs = replace(ActionInputs(token="t"), repository="nintendo/castle")

    with pytest.raises(GithubException):
        fetch_config(inputs)
