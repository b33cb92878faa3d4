"""Data type definitions for the review request system."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

from auto_request_review.env_constants import (
    DEFAULT_CONFIG_PATH,
    IDENTITY_SEPARATOR,
    ActionInputNames,
    ConfigSections,
    OptionKeys,
    ReviewerKeys,
    get_input,
)


def split_identities(value: Any) -> Tuple[str, ...]:
    """
    Parse a comma-separated identity list ("mario,luigi") into a tuple.

    Lists are accepted as well. Blank entries are dropped.
    """
    if not value:
        return ()
    if isinstance(value, str):
        value = value.split(IDENTITY_SEPARATOR)
    return tuple(str(name).strip() for name in value if str(name).strip())


def _as_mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_names(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(name) for name in value if name is not None)


def _parse_count(value: Any, option: OptionKeys) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        print(
            f"Warning: Could not read option '{option.value}' "
            f"(got {value!r}), ignoring it"
        )
        return None


def _parse_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


@dataclass(frozen=True)
class GroupReference:
    """A configured name that refers to a group of identities."""

    name: str
    members: FrozenSet[str]


@dataclass(frozen=True)
class LiteralIdentity:
    """A configured name taken literally as a person (or team:) identity."""

    name: str


ConfiguredName = Union[GroupReference, LiteralIdentity]


@dataclass(frozen=True)
class ReviewerRules:
    """
    The "reviewers" section of the configuration.

    Attributes:
        defaults: Names used when no rule-based reviewer remains
        groups: Group name -> member identities (one level, never re-expanded)
        per_author: Author or group name -> names to request
    """

    defaults: Tuple[str, ...] = ()
    groups: Dict[str, FrozenSet[str]] = field(default_factory=dict)
    per_author: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Any) -> "ReviewerRules":
        raw = _as_mapping(raw)
        return cls(
            defaults=_as_names(raw.get(ReviewerKeys.DEFAULTS.value)),
            groups={
                str(name): frozenset(_as_names(members))
                for name, members in _as_mapping(
                    raw.get(ReviewerKeys.GROUPS.value)
                ).items()
            },
            per_author={
                str(name): _as_names(names)
                for name, names in _as_mapping(
                    raw.get(ReviewerKeys.PER_AUTHOR.value)
                ).items()
            },
        )


@dataclass(frozen=True)
class Options:
    """
    The "options" section of the configuration.

    Attributes:
        number_of_reviewers: How many reviewers to request (None = all)
        number_of_assignees: How many assignees to add
        ignored_reviewers: Identities never requested as reviewers
        ignored_assignees: Identities never added as assignees
        ignore_draft: Skip draft pull requests
        ignored_keywords: Skip pull requests whose title contains any of these
        enable_group_assignment: Request the author's fellow group members
    """

    number_of_reviewers: Optional[int] = None
    number_of_assignees: int = 0
    ignored_reviewers: Tuple[str, ...] = ()
    ignored_assignees: Tuple[str, ...] = ()
    ignore_draft: bool = False
    ignored_keywords: Tuple[str, ...] = ()
    enable_group_assignment: bool = False

    @classmethod
    def from_dict(cls, raw: Any) -> "Options":
        raw = _as_mapping(raw)
        number_of_reviewers = _parse_count(
            raw.get(OptionKeys.NUMBER_OF_REVIEWERS.value),
            OptionKeys.NUMBER_OF_REVIEWERS,
        )
        number_of_assignees = _parse_count(
            raw.get(OptionKeys.NUMBER_OF_ASSIGNEES.value),
            OptionKeys.NUMBER_OF_ASSIGNEES,
        )
        if number_of_reviewers is not None and number_of_reviewers < 0:
            print(
                f"Warning: Option '{OptionKeys.NUMBER_OF_REVIEWERS.value}' "
                f"is negative ({number_of_reviewers}), not limiting reviewers"
            )
        return cls(
            # 0 or less reviewers means "not limited"
            number_of_reviewers=(
                number_of_reviewers
                if number_of_reviewers and number_of_reviewers > 0
                else None
            ),
            number_of_assignees=max(number_of_assignees or 0, 0),
            ignored_reviewers=split_identities(
                raw.get(OptionKeys.IGNORED_REVIEWERS.value)
            ),
            ignored_assignees=split_identities(
                raw.get(OptionKeys.IGNORED_ASSIGNEES.value)
            ),
            ignore_draft=_parse_flag(raw.get(OptionKeys.IGNORE_DRAFT.value)),
            ignored_keywords=_as_names(
                raw.get(OptionKeys.IGNORED_KEYWORDS.value)
            ),
            enable_group_assignment=_parse_flag(
                raw.get(OptionKeys.ENABLE_GROUP_ASSIGNMENT.value)
            ),
        )


@dataclass(frozen=True)
class Configuration:
    """
    A parsed configuration document.

    Missing or null sections are the same as empty ones.
    """

    reviewers: ReviewerRules = field(default_factory=ReviewerRules)
    files: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    options: Options = field(default_factory=Options)

    @classmethod
    def from_dict(cls, raw: Any) -> "Configuration":
        raw = _as_mapping(raw)
        return cls(
            reviewers=ReviewerRules.from_dict(
                raw.get(ConfigSections.REVIEWERS.value)
            ),
            files={
                str(pattern): _as_names(names)
                for pattern, names in _as_mapping(
                    raw.get(ConfigSections.FILES.value)
                ).items()
            },
            options=Options.from_dict(raw.get(ConfigSections.OPTIONS.value)),
        )


@dataclass(frozen=True)
class PullRequestContext:
    """
    The pull request a run is resolving reviewers for.

    Attributes:
        number: Pull request number
        author: Login of the pull request author
        title: Pull request title
        is_draft: Whether the pull request is a draft
        requested_reviewers: Logins already requested for review
        assignees: Logins already assigned
    """

    number: int
    author: str
    title: str = ""
    is_draft: bool = False
    requested_reviewers: Tuple[str, ...] = ()
    assignees: Tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, pull_request: Dict[str, Any]) -> "PullRequestContext":
        """Build from the "pull_request" object of a webhook event."""
        return cls(
            number=int(pull_request["number"]),
            author=pull_request["user"]["login"],
            title=pull_request.get("title") or "",
            is_draft=bool(pull_request.get("draft")),
            requested_reviewers=tuple(
                user["login"]
                for user in pull_request.get("requested_reviewers") or []
            ),
            assignees=tuple(
                user["login"] for user in pull_request.get("assignees") or []
            ),
        )


@dataclass
class ResolutionResult:
    """
    Outcome of one resolution run.

    Attributes:
        candidates: Union of the three rule families, before exclusions
        filtered: Candidates left after the exclusion pipeline
        previously_engaged: Requested + ignored reviewers (assignee source)
        used_defaults: Whether the default reviewers were used
        reviewers: Reviewers to request
        assignees: Assignees to add
    """

    candidates: FrozenSet[str] = frozenset()
    filtered: FrozenSet[str] = frozenset()
    previously_engaged: FrozenSet[str] = frozenset()
    used_defaults: bool = False
    reviewers: List[str] = field(default_factory=list)
    assignees: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ActionInputs:
    """Action inputs and runner variables, read once per run."""

    token: str
    config_path: str = DEFAULT_CONFIG_PATH
    use_local: bool = False
    number_of_reviewers: str = ""
    number_of_assignees: str = ""
    ignored_reviewers: str = ""
    repository: str = ""
    ref: str = ""
    event_path: str = ""
    output_path: str = ""

    @classmethod
    def from_env(cls) -> "ActionInputs":
        number_of_reviewers = get_input(ActionInputNames.NUMBER_OF_REVIEWERS)
        number_of_assignees = get_input(ActionInputNames.NUMBER_OF_ASSIGNEES)
        for name, value in (
            (ActionInputNames.NUMBER_OF_REVIEWERS, number_of_reviewers),
            (ActionInputNames.NUMBER_OF_ASSIGNEES, number_of_assignees),
        ):
            if value and not value.isdigit():
                raise ValueError(
                    f"{name.value} must be a non-negative integer, got {value!r}"
                )

        return cls(
            token=get_input(ActionInputNames.TOKEN),
            config_path=get_input(ActionInputNames.CONFIG) or DEFAULT_CONFIG_PATH,
            use_local=get_input(ActionInputNames.USE_LOCAL).lower() == "true",
            number_of_reviewers=number_of_reviewers,
            number_of_assignees=number_of_assignees,
            ignored_reviewers=get_input(ActionInputNames.IGNORED_REVIEWERS),
            repository=os.environ.get("GITHUB_REPOSITORY", ""),
            ref=os.environ.get("GITHUB_REF", ""),
            event_path=os.environ.get("GITHUB_EVENT_PATH", ""),
            output_path=os.environ.get("GITHUB_OUTPUT", ""),
        )
