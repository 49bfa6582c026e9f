"""Identity-matching thresholds and bulk-import sources."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .env import env_int, require_env_vars
from .errors import InvalidConfigurationValueError

CONFIDENT_MATCH_THRESHOLD = 80
MAX_SUGGESTIONS = 5
SUGGESTION_FLOOR = 50


@dataclass(frozen=True, slots=True)
class MatchingConfig:
    confident_match_threshold: int = CONFIDENT_MATCH_THRESHOLD
    max_suggestions: int = MAX_SUGGESTIONS
    suggestion_floor: int = SUGGESTION_FLOOR


@dataclass(frozen=True, slots=True)
class ImportSourceConfig:
    """Where bulk imports read files and the roster from."""

    folder: Path
    roster_path: Path


def get_matching_config() -> MatchingConfig:
    """Defaults, overridable through ``COITRACK_MATCH_THRESHOLD`` and friends.

    The suggestion floor may not sit above the match threshold.
    """

    threshold = env_int("COITRACK_MATCH_THRESHOLD", CONFIDENT_MATCH_THRESHOLD, maximum=100)
    floor = env_int("COITRACK_SUGGESTION_FLOOR", SUGGESTION_FLOOR, maximum=100)
    if floor > threshold:
        raise InvalidConfigurationValueError(
            "COITRACK_SUGGESTION_FLOOR", str(floor), f"is above the match threshold {threshold}"
        )
    return MatchingConfig(
        confident_match_threshold=threshold,
        max_suggestions=env_int("COITRACK_MAX_SUGGESTIONS", MAX_SUGGESTIONS, minimum=1),
        suggestion_floor=floor,
    )


def get_import_source_config(
    *,
    folder: str | None = None,
    roster_path: str | None = None,
) -> ImportSourceConfig:
    """Explicit overrides win; otherwise both paths come from the environment."""

    names = [
        name
        for name, override in (
            ("COITRACK_IMPORT_FOLDER", folder),
            ("COITRACK_ROSTER_PATH", roster_path),
        )
        if override is None
    ]
    values = require_env_vars(names) if names else {}
    return ImportSourceConfig(
        folder=Path(folder or values["COITRACK_IMPORT_FOLDER"]).expanduser(),
        roster_path=Path(roster_path or values["COITRACK_ROSTER_PATH"]).expanduser(),
    )
