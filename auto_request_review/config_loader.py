"""
Configuration Loader

Loads the review rules (YAML) either from the checked out workspace or
from the repository on GitHub, at the ref of the triggering event.
Action inputs override the matching "options" of the file.
"""
from typing import Any, Dict

import yaml
from github import UnknownObjectException

from auto_request_review.data_types import ActionInputs, Configuration
from auto_request_review.env_constants import ConfigSections, OptionKeys
from auto_request_review.utilities import get_remote_repository


class ConfigurationNotFound(Exception):
    """The configuration file does not exist (or is empty)."""


def read_local_config(config_path: str) -> str:
    try:
        with open(config_path, encoding="utf-8") as config_file:
            content = config_file.read()
    except OSError as exc:
        raise ConfigurationNotFound(
            f"Could not read local configuration {config_path}: {exc}"
        ) from exc

    if not content.strip():
        raise ConfigurationNotFound(
            f"Local configuration {config_path} is empty"
        )
    return content


def read_remote_config(inputs: ActionInputs) -> str:
    with get_remote_repository(inputs) as repository:
        try:
            if inputs.ref:
                contents = repository.get_contents(
                    inputs.config_path, ref=inputs.ref
                )
            else:
                contents = repository.get_contents(inputs.config_path)
        except UnknownObjectException as exc:
            raise ConfigurationNotFound(
                f"No configuration file {inputs.config_path} "
                f"in {inputs.repository}@{inputs.ref or 'default branch'}"
            ) from exc

        return contents.decoded_content.decode("utf-8")


def parse_config(content: str) -> Dict[str, Any]:
    """Parse the YAML document; anything but a mapping counts as empty."""
    raw = yaml.safe_load(content)
    if not isinstance(raw, dict):
        print("Warning: Configuration is not a mapping, treating it as empty")
        return {}
    return raw


def apply_input_overrides(
    raw: Dict[str, Any], inputs: ActionInputs
) -> Dict[str, Any]:
    """Non-empty action inputs win over the file's options."""
    options = dict(raw.get(ConfigSections.OPTIONS.value) or {})
    overrides = {
        OptionKeys.NUMBER_OF_REVIEWERS: inputs.number_of_reviewers,
        OptionKeys.NUMBER_OF_ASSIGNEES: inputs.number_of_assignees,
        OptionKeys.IGNORED_REVIEWERS: inputs.ignored_reviewers,
    }
    for key, value in overrides.items():
        if value:
            options[key.value] = value

    return {**raw, ConfigSections.OPTIONS.value: options}


def fetch_config(inputs: ActionInputs) -> Configuration:
    """
    Fetch, parse and finalize the configuration.

    Raises:
        ConfigurationNotFound: the file is missing (locally or remotely)
        github.GithubException: any other failure talking to GitHub
    """
    print(
        f"Received {inputs.number_of_reviewers or '-'} reviewers, "
        f"{inputs.number_of_assignees or '-'} assignees and "
        f"'{inputs.ignored_reviewers}' ignored from inputs"
    )

    if inputs.use_local:
        content = read_local_config(inputs.config_path)
    else:
        content = read_remote_config(inputs)

    raw = apply_input_overrides(parse_config(content), inputs)
    print(f"Final fetched config: {raw}")
    return Configuration.from_dict(raw)
