"""
Auto Request Review - Action Entry Point

Requests reviewers and adds assignees on the pull request that triggered
the workflow, following the rules of the configuration file.

FLOW:
1. Fetch the configuration (workspace file with use_local, otherwise the
   file on GitHub at the event ref). No file -> warning, nothing to do.
2. Gate on the draft flag and the title keywords.
3. List the changed files and resolve reviewers / assignees
   (see auto_request_review/reviewer.py for the rules).
4. Request the reviewers, add the assignees, and expose both lists as the
   "requested_reviewers" / "assigned_reviewers" step outputs.

Usage:
    python scripts/request_reviews.py
    python scripts/request_reviews.py --dry-run --changed-file src/app.js

Exit Codes:
    0: Success, or nothing to request
    1: Failure (GitHub error, invalid inputs)
"""

import argparse
import random
import sys
import traceback
from pathlib import Path
from typing import List, Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# pylint: next-line: disable=wrong-import-position
from auto_request_review.config_loader import (  # noqa: E402
    ConfigurationNotFound,
    fetch_config,
)
from auto_request_review.data_types import (  # noqa: E402
    ActionInputs,
    ResolutionResult,
)
from auto_request_review.env_constants import (  # noqa: E402
    ASSIGNED_REVIEWERS_OUTPUT,
    REQUESTED_REVIEWERS_OUTPUT,
)
from auto_request_review.reviewer import (  # noqa: E402
    resolve_reviewers,
    should_request_review,
)
from auto_request_review.utilities import (  # noqa: E402
    assign_assignees,
    assign_reviewers,
    fetch_changed_files,
    get_pull_request,
    load_pull_request_context,
    write_outputs,
)


def run(
    inputs: Optional[ActionInputs] = None,
    dry_run: bool = False,
    changed_files: Optional[List[str]] = None,
    rng=random,
) -> Optional[ResolutionResult]:
    """
    Run the whole flow for the triggering pull request.

    Args:
        inputs: Action inputs (read from the environment when None)
        dry_run: Resolve and print, without touching the pull request
        changed_files: Use these paths instead of listing them on GitHub
        rng: Random source used for sampling

    Returns:
        The resolution, or None when the run stopped early
    """
    if inputs is None:
        inputs = ActionInputs.from_env()

    print("Fetching configuration file from the source branch")
    try:
        config = fetch_config(inputs)
    except ConfigurationNotFound as exc:
        print(f"Warning: {exc}; terminating the process")
        return None

    context = load_pull_request_context(inputs.event_path)

    if not should_request_review(context.title, context.is_draft, config):
        print("Matched the ignoring rules; terminating the process")
        return None

    print(f"Requested reviewer usernames found: {list(context.requested_reviewers)}")
    print(f"Assigned reviewer usernames found: {list(context.assignees)}")
    print(f"Ignored reviewers found: {list(config.options.ignored_reviewers)}")

    if changed_files is None:
        print("Fetching changed files in the pull request")
        with get_pull_request(inputs, context.number) as pull_request:
            changed_files = fetch_changed_files(pull_request)
    print(f"Changed files: {len(changed_files)}")

    result = resolve_reviewers(config, context, changed_files, rng)
    if result is None:
        print("No reviewers matched and no default reviewers; terminating the process")
        return None

    print(f"Reviewers identified: {sorted(result.candidates)}")
    print(f"Reviewers after exclusions: {sorted(result.filtered)}")
    if result.used_defaults:
        print("Matched no reviewers, fell back to the default reviewers")
    print(f"Previously engaged: {sorted(result.previously_engaged)}")
    print(f"🔍 Requesting reviewers: {', '.join(result.reviewers)}")
    print(f"🔍 Requesting assignees: {', '.join(result.assignees)}")

    if dry_run:
        print("Dry run: not requesting anything")
        return result

    with get_pull_request(inputs, context.number) as pull_request:
        assign_reviewers(pull_request, result.reviewers)
        assign_assignees(pull_request, result.assignees)

    write_outputs(
        inputs.output_path,
        {
            REQUESTED_REVIEWERS_OUTPUT: ",".join(result.reviewers),
            ASSIGNED_REVIEWERS_OUTPUT: ",".join(result.assignees),
        },
    )
    print("✅ Done")
    return result


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Request reviewers and assignees for a pull request"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve reviewers without requesting them",
    )
    parser.add_argument(
        "--changed-file",
        action="append",
        dest="changed_files",
        help="Changed file path (repeatable); skips listing them on GitHub",
    )
    args = parser.parse_args()

    try:
        run(dry_run=args.dry_run, changed_files=args.changed_files)
    except Exception:  # noqa: BLE001 # pylint: disable=broad-except
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
