"""Test utilities for building contexts and deterministic sampling."""

from dataclasses import replace
from typing import Any, List, Sequence

from auto_request_review.data_types import PullRequestContext
from tests.conftest import CONTEXT


class FirstPicks:
    """
    Stand-in for the random module: "sample" returns the first k names.

    The pool handed to sample is sorted, so the picks are predictable.
    """

    def __init__(self) -> None:
        self.calls: List[int] = []

    def sample(self, population: Sequence[Any], k: int) -> List[Any]:
        self.calls.append(k)
        return list(population)[:k]


def make_context(**changes: Any) -> PullRequestContext:
    """Copy the default pull request context with some fields changed."""
    return replace(CONTEXT, **changes)
