"""
Check a review configuration file before committing it.

Reports problems that would otherwise be silently ignored at run time:
unknown sections or options, rule values that are not lists, globs that
do not compile, groups listing other groups (groups only expand one
level) and invalid counts.

Exit code 0: No problems found
Exit code 1: Problems found
Exit code 2: The file could not be read or parsed
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# pylint: next-line: disable=wrong-import-position
from auto_request_review.config_loader import (  # noqa: E402
    ConfigurationNotFound,
    read_local_config,
)
from auto_request_review.env_constants import (  # noqa: E402
    DEFAULT_CONFIG_PATH,
    ConfigSections,
    OptionKeys,
    ReviewerKeys,
)
from auto_request_review.reviewer import compile_pattern  # noqa: E402

COUNT_OPTIONS = {
    OptionKeys.NUMBER_OF_REVIEWERS.value: 0,
    OptionKeys.NUMBER_OF_ASSIGNEES.value: 0,
}


def _as_count(value: Any) -> Optional[int]:
    """Integers and integer strings ("2") are counts, as they are at run time."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _check_names(value: Any, where: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        return [f"{where}: expected a list of names, got {type(value).__name__}"]
    return [
        f"{where}: entry {name!r} is not a string"
        for name in value
        if not isinstance(name, str)
    ]


def _check_mapping(value: Any, where: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"{where}: expected a mapping, got {type(value).__name__}")
    return value


def check_reviewers(reviewers: Dict[str, Any]) -> List[str]:
    problems = []
    known = {key.value for key in ReviewerKeys}
    for key in reviewers:
        if key not in known:
            problems.append(f"reviewers: unknown key '{key}'")

    problems += _check_names(
        reviewers.get(ReviewerKeys.DEFAULTS.value), "reviewers.defaults"
    )

    try:
        groups = _check_mapping(
            reviewers.get(ReviewerKeys.GROUPS.value), "reviewers.groups"
        )
    except TypeError as exc:
        problems.append(str(exc))
        groups = {}
    for name, members in groups.items():
        where = f"reviewers.groups.{name}"
        problems += _check_names(members, where)
        for member in members if isinstance(members, list) else []:
            if member in groups:
                problems.append(
                    f"{where}: '{member}' is a group; groups are not expanded "
                    "inside groups and it will be taken as a username"
                )

    try:
        per_author = _check_mapping(
            reviewers.get(ReviewerKeys.PER_AUTHOR.value),
            "reviewers.per_author",
        )
    except TypeError as exc:
        problems.append(str(exc))
        per_author = {}
    for author, names in per_author.items():
        problems += _check_names(names, f"reviewers.per_author.{author}")

    return problems


def check_files(files: Dict[str, Any]) -> List[str]:
    problems = []
    for pattern, names in files.items():
        if compile_pattern(pattern) is None:
            problems.append(f"files: '{pattern}' is not a valid glob")
        problems += _check_names(names, f"files.{pattern}")
    return problems


def check_options(options: Dict[str, Any]) -> List[str]:
    problems = []
    known = {key.value for key in OptionKeys}
    for key, value in options.items():
        if key not in known:
            problems.append(f"options: unknown option '{key}'")
        elif key in COUNT_OPTIONS:
            minimum = COUNT_OPTIONS[key]
            count = _as_count(value)
            if count is None:
                problems.append(f"options.{key}: expected an integer")
            elif count < minimum:
                problems.append(f"options.{key}: must be at least {minimum}")

    problems += _check_names(
        options.get(OptionKeys.IGNORED_KEYWORDS.value), "options.ignored_keywords"
    )
    return problems


def validate_config(raw: Any) -> List[str]:
    """Return a description of every problem found in a parsed config."""
    if raw is None:
        return []
    if not isinstance(raw, dict):
        return ["configuration: expected a mapping at the top level"]

    problems = []
    known = {section.value for section in ConfigSections}
    for section in raw:
        if section not in known:
            problems.append(f"configuration: unknown section '{section}'")

    checks = (
        (ConfigSections.REVIEWERS, check_reviewers),
        (ConfigSections.FILES, check_files),
        (ConfigSections.OPTIONS, check_options),
    )
    for section, check in checks:
        try:
            value = _check_mapping(raw.get(section.value), section.value)
        except TypeError as exc:
            problems.append(str(exc))
            continue
        problems += check(value)

    return problems


def main() -> None:
    parser = argparse.ArgumentParser(description="Check a review configuration file")
    parser.add_argument(
        "config",
        nargs="?",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path of the configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    args = parser.parse_args()

    try:
        raw = yaml.safe_load(read_local_config(args.config))
    except (ConfigurationNotFound, yaml.YAMLError) as exc:
        print(f"❌ Could not load {args.config}: {exc}")
        sys.exit(2)

    problems = validate_config(raw)
    if not problems:
        print(f"✅ {args.config} looks good")
        sys.exit(0)

    print(f"⚠️  {len(problems)} problem(s) found in {args.config}:")
    for problem in problems:
        print(f"   - {problem}")
    sys.exit(1)


if __name__ == "__main__":
    main()
