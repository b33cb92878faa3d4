import json
from contextlib import contextmanager
from typing import Dict, Iterator, List, Tuple

from github import Auth, Github
from github.PullRequest import PullRequest
from github.Repository import Repository

from auto_request_review.data_types import ActionInputs, PullRequestContext
from auto_request_review.env_constants import (
    CHANGED_FILES_PER_PAGE,
    TEAM_PREFIX,
)


def load_pull_request_context(event_path: str) -> PullRequestContext:
    """Read the pull request of the triggering event (GITHUB_EVENT_PATH)."""
    if not event_path:
        raise ValueError("GITHUB_EVENT_PATH must be set")

    with open(event_path, encoding="utf-8") as event_file:
        event = json.load(event_file)

    if "pull_request" not in event:
        raise ValueError(
            "The triggering event has no pull request "
            "(use pull_request or pull_request_target)"
        )
    return PullRequestContext.from_payload(event["pull_request"])


@contextmanager
def get_remote_repository(inputs: ActionInputs) -> Iterator[Repository]:
    """
    Open the repository the action runs for on GitHub

    Args:
        inputs: Action inputs carrying the token and "owner/repo"
    """
    if not inputs.token:
        raise ValueError("A GitHub token must be provided (token input)")
    if not inputs.repository:
        raise ValueError("GITHUB_REPOSITORY must be set")

    client = Github(
        auth=Auth.Token(inputs.token), per_page=CHANGED_FILES_PER_PAGE
    )
    try:
        yield client.get_repo(inputs.repository)
    finally:
        client.close()


@contextmanager
def get_pull_request(
    inputs: ActionInputs, number: int
) -> Iterator[PullRequest]:
    with get_remote_repository(inputs) as repository:
        yield repository.get_pull(number)


def fetch_changed_files(pull_request: PullRequest) -> List[str]:
    """Filenames changed by the pull request (all pages)."""
    return [changed.filename for changed in pull_request.get_files()]


def split_teams(reviewers: List[str]) -> Tuple[List[str], List[str]]:
    """
    Split "team:<slug>" reviewers from individual ones.

    Returns:
        Tuple of (individual logins, team slugs)
    """
    individuals = []
    teams = []
    for reviewer in reviewers:
        if reviewer.startswith(TEAM_PREFIX):
            teams.append(reviewer[len(TEAM_PREFIX):])
        else:
            individuals.append(reviewer)
    return individuals, teams


def assign_reviewers(pull_request: PullRequest, reviewers: List[str]) -> None:
    if not reviewers:
        print("No reviewers to request")
        return

    individuals, teams = split_teams(reviewers)
    print(f"Requesting individual reviewers: {', '.join(individuals) or 'None'}")
    print(f"Requesting team reviewers: {', '.join(teams) or 'None'}")
    pull_request.create_review_request(
        reviewers=individuals, team_reviewers=teams
    )


def assign_assignees(pull_request: PullRequest, assignees: List[str]) -> None:
    if not assignees:
        print("No assignees to add")
        return

    print(f"Adding assignees: {', '.join(assignees)}")
    pull_request.add_to_assignees(*assignees)


def write_outputs(output_path: str, outputs: Dict[str, str]) -> None:
    """Append step outputs to GITHUB_OUTPUT (printed when not running in Actions)."""
    lines = [f"{name}={value}" for name, value in outputs.items()]
    if not output_path:
        for line in lines:
            print(f"Output: {line}")
        return

    with open(output_path, "a", encoding="utf-8") as output_file:
        for line in lines:
            output_file.write(f"{line}\n")
