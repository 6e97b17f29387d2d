"""Data models for PrintGuard."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from printguard.errors import ConfigValidationError


class Action(str, Enum):
    """Verdict action levels."""

    BLOCK = "BLOCK"
    WARN = "WARN"
    PASS = "PASS"


class ChangeKind(str, Enum):
    """Status letters reported by ``git diff --name-status``."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    TYPE_CHANGED = "T"
    UNMERGED = "U"
    UNTRACKED = "?"
    UNKNOWN = "X"

    @classmethod
    def from_status(cls, status: str) -> ChangeKind:
        # Rename and copy statuses carry a similarity score, e.g. "R087".
        letter = status[:1]
        for kind in cls:
            if kind.value == letter:
                return kind
        return cls.UNKNOWN


@dataclass(frozen=True)
class ScanPolicy:
    """The persisted scan configuration."""

    file_extensions: tuple[str, ...]
    warn_only: bool
    search_terms: tuple[str, ...]
    has_line_details: bool = False
    files_to_exclude: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileExtensions": list(self.file_extensions),
            "warnOnly": self.warn_only,
            "searchTerms": list(self.search_terms),
            "hasLineDetails": self.has_line_details,
            "filesToExclude": list(self.files_to_exclude),
        }

    @classmethod
    def from_dict(cls, data: Any) -> ScanPolicy:
        """Build a policy from its persisted mapping.

        ``hasLineDetails`` and ``filesToExclude`` are optional so that files
        written before those keys existed still load.

        Raises:
            ConfigValidationError: If a required key is missing or a value has
                the wrong type.
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("config must be a mapping")

        extensions = _string_list(data.get("fileExtensions"), "fileExtensions")
        if not extensions:
            raise ConfigValidationError("fileExtensions must contain at least one entry")
        bad = [ext for ext in extensions if not ext.startswith(".")]
        if bad:
            raise ConfigValidationError(
                f"Invalid extensions (extensions must start with '.'): {', '.join(bad)}"
            )

        terms = _string_list(data.get("searchTerms"), "searchTerms")
        if not terms:
            raise ConfigValidationError("searchTerms must contain at least one entry")

        warn_only = data.get("warnOnly")
        if not isinstance(warn_only, bool):
            raise ConfigValidationError("warnOnly must be a boolean")

        line_details = data.get("hasLineDetails", False)
        if not isinstance(line_details, bool):
            raise ConfigValidationError("hasLineDetails must be a boolean")

        excludes = data.get("filesToExclude")
        exclude_list = [] if excludes is None else _string_list(excludes, "filesToExclude")

        return cls(
            file_extensions=tuple(extensions),
            warn_only=warn_only,
            search_terms=tuple(terms),
            has_line_details=line_details,
            files_to_exclude=tuple(exclude_list),
        )


def _string_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list):
        raise ConfigValidationError(f"{key} must be a list of strings")
    if not all(isinstance(item, str) for item in value):
        raise ConfigValidationError(f"{key} must contain only strings")
    return [item for item in value if item]


@dataclass
class StagedChange:
    """A single entry of the staged change listing."""

    path: str
    kind: ChangeKind
    old_path: str | None = None


@dataclass
class Match:
    """A configured pattern found in staged content."""

    file: str
    line: int | None = None
    text: str | None = None

    @property
    def location(self) -> str:
        if self.line is None:
            return self.file
        return f"{self.file}:{self.line}"

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"file": self.file}
        if self.line is not None:
            data["line"] = self.line
        if self.text is not None:
            data["text"] = self.text
        return data


@dataclass
class Verdict:
    """The outcome of one guard run."""

    action: Action
    exit_code: int
    reason: str = ""
    matches: list[Match] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "verdict": self.action.value,
            "exit_code": self.exit_code,
            "reason": self.reason,
            "matches": [m.to_dict() for m in self.matches],
        }
