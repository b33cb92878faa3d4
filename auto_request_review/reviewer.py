"""
Reviewer Resolution - Reviewers and Assignees for a Pull Request

BUSINESS LOGIC:
1. Gate: nothing is requested when the pull request is a draft and
   "ignore_draft" is on, or when its title contains one of the
   "ignored_keywords" (literal, case-sensitive).

2. Candidates are collected from three independent rules and unioned:
   a) FILES: every glob under "files" matching a changed file adds its
      reviewers (the author is never added)
   b) PER AUTHOR: "per_author" entries keyed by the author, or by any
      group the author belongs to
   c) SAME GROUPS: with "enable_group_assignment", the other members of
      every group the author belongs to

3. Exclusions, in this order:
   author -> already requested -> already assigned -> ignored_reviewers
   Already requested and ignored reviewers are remembered as
   "previously engaged" and can still be picked as assignees.

4. Fallback: when nobody is left, "reviewers.defaults" is used instead,
   minus the same exclusions. When nothing is left of the defaults either,
   nothing is requested.

5. Sampling (no replacement):
   - Reviewers: "number_of_reviewers" of them, or all when unset
   - Assignees: "number_of_assignees" of them (default 0), drawn from the
     picked reviewers plus the previously engaged ones, minus
     "ignored_assignees"

Names in rules can be a group name or a person. A group expands to its
members, one level only: a group name listed inside another group is
taken literally.

EXAMPLE:
groups: mario-brothers = mario, luigi
files: "**/*.js" -> mario-brothers, princess-peach
Author luigi changes path/to/file.js
-> candidates: mario, luigi, princess-peach
-> after exclusions: mario, princess-peach
"""

import random
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

import pathspec

from auto_request_review.data_types import (
    Configuration,
    ConfiguredName,
    GroupReference,
    LiteralIdentity,
    Options,
    PullRequestContext,
    ResolutionResult,
)


def compile_pattern(pattern: str) -> Optional[pathspec.PathSpec]:
    """Compile a gitignore-style glob; None when it is not a valid one."""
    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", [pattern])
    except (TypeError, ValueError):
        return None


def matches(pattern: str, path: str) -> bool:
    """
    Whether a changed file path matches a "files" rule key.

    "*" stays within a path segment, "**" crosses directories.
    An invalid pattern matches nothing.
    """
    spec = compile_pattern(pattern)
    return spec is not None and spec.match_file(path)


def classify(name: str, groups: Dict[str, FrozenSet[str]]) -> ConfiguredName:
    if name in groups:
        return GroupReference(name=name, members=groups[name])
    return LiteralIdentity(name=name)


def resolve(name: str, groups: Dict[str, FrozenSet[str]]) -> FrozenSet[str]:
    """Expand a group name to its members, or take a name literally."""
    configured = classify(name, groups)
    if isinstance(configured, GroupReference):
        return configured.members
    return frozenset((configured.name,))


def resolve_all(
    names: Iterable[str], groups: Dict[str, FrozenSet[str]]
) -> FrozenSet[str]:
    resolved: set = set()
    for name in names:
        resolved.update(resolve(name, groups))
    return frozenset(resolved)


def groups_of(author: str, groups: Dict[str, FrozenSet[str]]) -> List[str]:
    """Names of the groups the author is a member of."""
    return [name for name, members in groups.items() if author in members]


def identify_reviewers_by_changed_files(
    config: Configuration,
    changed_files: Iterable[str],
    excludes: Iterable[str] = (),
) -> FrozenSet[str]:
    compiled = []
    for pattern, names in config.files.items():
        spec = compile_pattern(pattern)
        if spec is not None:
            compiled.append((spec, names))

    reviewers: set = set()
    for path in changed_files:
        for spec, names in compiled:
            if spec.match_file(path):
                reviewers.update(resolve_all(names, config.reviewers.groups))

    return frozenset(reviewers) - frozenset(excludes)


def identify_reviewers_by_author(
    config: Configuration, author: str
) -> FrozenSet[str]:
    """
    Reviewers configured for the author under "per_author".

    Groups are valid keys there: an entry keyed by a group applies to every
    member of that group.
    """
    groups = config.reviewers.groups
    keys = [author, *groups_of(author, groups)]

    reviewers: set = set()
    for key in keys:
        names = config.reviewers.per_author.get(key, ())
        reviewers.update(resolve_all(names, groups))
    return frozenset(reviewers)


def fetch_other_group_members(
    config: Configuration, author: str
) -> FrozenSet[str]:
    if not config.options.enable_group_assignment:
        return frozenset()

    groups = config.reviewers.groups
    members: set = set()
    for name in groups_of(author, groups):
        members.update(groups[name])
    members.discard(author)
    return frozenset(members)


def collect_candidates(
    config: Configuration, changed_files: Iterable[str], author: str
) -> FrozenSet[str]:
    """Union of the files, per-author and same-group rules."""
    return (
        identify_reviewers_by_changed_files(
            config, changed_files, excludes=[author]
        )
        | identify_reviewers_by_author(config, author)
        | fetch_other_group_members(config, author)
    )


def should_request_review(
    title: str, is_draft: bool, config: Configuration
) -> bool:
    options = config.options
    if options.ignore_draft and is_draft:
        return False
    title = title or ""
    return not any(keyword in title for keyword in options.ignored_keywords)


def exclude_author(candidates: FrozenSet[str], author: str) -> FrozenSet[str]:
    return candidates - {author}


def exclude_requested_reviewers(
    candidates: FrozenSet[str], requested: Iterable[str]
) -> Tuple[FrozenSet[str], FrozenSet[str]]:
    """Drop already requested reviewers, returning them as engaged."""
    requested = frozenset(requested)
    return candidates - requested, requested


def exclude_assignees(
    candidates: FrozenSet[str], assignees: Iterable[str]
) -> FrozenSet[str]:
    return candidates - frozenset(assignees)


def exclude_ignored_reviewers(
    candidates: FrozenSet[str], ignored: Iterable[str]
) -> Tuple[FrozenSet[str], FrozenSet[str]]:
    """Drop ignored reviewers, returning them as engaged."""
    ignored = frozenset(ignored)
    return candidates - ignored, ignored


def apply_exclusions(
    candidates: FrozenSet[str],
    context: PullRequestContext,
    options: Options,
) -> Tuple[FrozenSet[str], FrozenSet[str]]:
    """
    Run the exclusion stages in order.

    Returns:
        Tuple of (remaining candidates, previously engaged identities)
    """
    remaining = exclude_author(candidates, context.author)
    remaining, requested = exclude_requested_reviewers(
        remaining, context.requested_reviewers
    )
    remaining = exclude_assignees(remaining, context.assignees)
    remaining, ignored = exclude_ignored_reviewers(
        remaining, options.ignored_reviewers
    )
    return remaining, requested | ignored


def fetch_default_reviewers(
    config: Configuration, excludes: Iterable[str] = ()
) -> FrozenSet[str]:
    defaults = resolve_all(config.reviewers.defaults, config.reviewers.groups)
    return defaults - frozenset(excludes)


def randomly_pick(
    names: Iterable[str], number: Optional[int], rng=random
) -> List[str]:
    """
    Pick "number" names uniformly at random, without replacement.

    None picks everything. The pool is sorted first so a seeded generator
    always yields the same picks.
    """
    pool = sorted(set(names))
    if number is None or len(pool) <= number:
        return pool
    if number <= 0:
        return []
    return rng.sample(pool, number)


def randomly_pick_reviewers(
    reviewers: Iterable[str], config: Configuration, rng=random
) -> List[str]:
    return randomly_pick(reviewers, config.options.number_of_reviewers, rng)


def randomly_pick_assignees(
    reviewers: Iterable[str],
    previously_engaged: Iterable[str],
    config: Configuration,
    rng=random,
) -> List[str]:
    options = config.options
    pool = (frozenset(reviewers) | frozenset(previously_engaged)) - frozenset(
        options.ignored_assignees
    )
    return randomly_pick(pool, options.number_of_assignees, rng)


def resolve_reviewers(
    config: Configuration,
    context: PullRequestContext,
    changed_files: Iterable[str],
    rng=random,
) -> Optional[ResolutionResult]:
    """
    Resolve who to request and who to assign for a pull request.

    The gate (should_request_review) is expected to have passed already.

    Returns:
        The resolution, or None when no reviewer (rule-based or default)
        is left and nothing should be requested
    """
    candidates = collect_candidates(config, changed_files, context.author)
    filtered, previously_engaged = apply_exclusions(
        candidates, context, config.options
    )

    used_defaults = False
    if not filtered:
        # Defaults go through the same exclusions; the engaged pool is unchanged
        filtered, _ = apply_exclusions(
            fetch_default_reviewers(config, excludes=[context.author]),
            context,
            config.options,
        )
        if not filtered:
            return None
        used_defaults = True

    reviewers = randomly_pick_reviewers(filtered, config, rng)
    assignees = randomly_pick_assignees(
        reviewers, previously_engaged, config, rng
    )

    return ResolutionResult(
        candidates=candidates,
        filtered=filtered,
        previously_engaged=previously_engaged,
        used_defaults=used_defaults,
        reviewers=reviewers,
        assignees=assignees,
    )
