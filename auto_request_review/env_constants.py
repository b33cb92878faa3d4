import os
from enum import Enum

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv())


# Configuration sections enum
class ConfigSections(str, Enum):
    """Top-level sections of the configuration file"""

    REVIEWERS = "reviewers"
    FILES = "files"
    OPTIONS = "options"


class ReviewerKeys(str, Enum):
    """Keys of the "reviewers" section"""

    DEFAULTS = "defaults"  # Fallback reviewers
    GROUPS = "groups"  # Group name -> members
    PER_AUTHOR = "per_author"  # Author or group -> reviewers


class OptionKeys(str, Enum):
    """Recognized keys of the "options" section"""

    NUMBER_OF_REVIEWERS = "number_of_reviewers"
    NUMBER_OF_ASSIGNEES = "number_of_assignees"
    IGNORED_REVIEWERS = "ignored_reviewers"
    IGNORED_ASSIGNEES = "ignored_assignees"
    IGNORE_DRAFT = "ignore_draft"
    IGNORED_KEYWORDS = "ignored_keywords"
    ENABLE_GROUP_ASSIGNMENT = "enable_group_assignment"


# Action inputs, as exposed by the runner (INPUT_<NAME>)
class ActionInputNames(str, Enum):
    """Environment variables carrying the action inputs"""

    TOKEN = "INPUT_TOKEN"
    CONFIG = "INPUT_CONFIG"
    USE_LOCAL = "INPUT_USE_LOCAL"
    NUMBER_OF_REVIEWERS = "INPUT_NUMBER_OF_REVIEWERS"
    NUMBER_OF_ASSIGNEES = "INPUT_NUMBER_OF_ASSIGNEES"
    IGNORED_REVIEWERS = "INPUT_IGNORED_REVIEWERS"


DEFAULT_CONFIG_PATH = ".github/auto_request_review.yml"

# Reviewers prefixed with this marker are requested as team reviewers
TEAM_PREFIX = "team:"

# Separator of the ignored_reviewers / ignored_assignees options
IDENTITY_SEPARATOR = ","

# Changed files are listed 100 per page (GitHub maximum)
CHANGED_FILES_PER_PAGE = 100

# Step outputs
REQUESTED_REVIEWERS_OUTPUT = "requested_reviewers"
ASSIGNED_REVIEWERS_OUTPUT = "assigned_reviewers"


def get_input(name: ActionInputNames, default: str = "") -> str:
    """Read an action input from the environment, stripped."""
    return os.environ.get(name.value, default).strip()
