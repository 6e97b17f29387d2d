"""Configuration management for PrintGuard."""

from __future__ import annotations

import json
import sys
from dataclasses import InitVar, dataclass, field
from pathlib import Path
from typing import Any

import yaml  # type: ignore

from printguard.errors import ConfigValidationError, NoExistingConfig, PrintGuardError
from printguard.models import ScanPolicy
from printguard.prompts import Prompter, collect_setup_answers

DEFAULT_CONFIG_NAME = "print_check_config.json"

_YAML_SUFFIXES = (".yml", ".yaml")

POLICY_KEYS = ("fileExtensions", "warnOnly", "searchTerms", "hasLineDetails", "filesToExclude")


@dataclass
class GuardSettings:
    """Per-invocation settings shared by every component.

    ``config`` may be relative to ``workdir``; ``config_path`` is always the
    resolved policy file.
    """

    workdir: Path = field(default_factory=Path.cwd)
    config: InitVar[str | Path | None] = None
    strict_scan: bool = False
    config_path: Path = field(init=False)

    def __post_init__(self, config: str | Path | None) -> None:
        self.workdir = Path(self.workdir)
        if config is None:
            self.config_path = self.workdir / DEFAULT_CONFIG_NAME
        else:
            path = Path(config)
            self.config_path = path if path.is_absolute() else self.workdir / path

    @property
    def custom_config_path(self) -> Path | None:
        """The policy path to hand to the hook, or None when it is the default."""
        if self.config_path == self.workdir / DEFAULT_CONFIG_NAME:
            return None
        return self.config_path

    @classmethod
    def from_args(
        cls,
        config: str | None = None,
        strict_scan: bool = False,
        workdir: str | Path | None = None,
    ) -> GuardSettings:
        return cls(
            workdir=Path(workdir) if workdir else Path.cwd(),
            config=config or None,
            strict_scan=strict_scan,
        )


# ---------------------------------------------------------------------------
# Answer normalization
# ---------------------------------------------------------------------------


def split_list(text: str) -> list[str]:
    """Split a comma list, trimming tokens and dropping blanks and duplicates."""
    return _dedupe(token.strip() for token in text.split(","))


def parse_extensions(text: str) -> list[str]:
    """Parse the extensions answer.

    Only the whole string is trimmed; tokens keep their spacing, so
    ``".ts, .js"`` is rejected for the `` .js`` token.
    """
    tokens = [token for token in text.strip().split(",") if token]
    invalid = [token for token in tokens if not token.startswith(".")]
    if invalid:
        raise ConfigValidationError(
            "Invalid extensions (extensions must start with '.') "
            f"Invalid Extensions: {','.join(invalid)}"
        )
    if not tokens:
        raise ConfigValidationError("At least one file extension is required")
    return _dedupe(tokens)


def parse_bool_answer(answer: str, field_name: str = "answer") -> bool:
    lowered = answer.lower()
    if lowered not in ("y", "n"):
        raise ConfigValidationError(f"Please answer y or n for {field_name} (got {answer!r})")
    return lowered == "y"


def normalize_answers(
    extensions: str,
    warn_only: str,
    search_terms: str,
    has_line_details: str,
    files_to_exclude: str = "",
) -> ScanPolicy:
    """Validate the raw setup answers and build a ScanPolicy.

    Raises:
        ConfigValidationError: With a message naming the offending input.
    """
    file_extensions = parse_extensions(extensions)
    warn_flag = parse_bool_answer(warn_only, "warn only")
    line_flag = parse_bool_answer(has_line_details, "line details")

    terms = split_list(search_terms)
    if not terms:
        raise ConfigValidationError("At least one search pattern is required")

    return ScanPolicy(
        file_extensions=tuple(file_extensions),
        warn_only=warn_flag,
        search_terms=tuple(terms),
        has_line_details=line_flag,
        files_to_exclude=tuple(split_list(files_to_exclude)),
    )


def parse_value(key: str, value: str) -> Any:
    """Convert a command-line value for ``key`` to its persisted form."""
    if key not in POLICY_KEYS:
        known = ", ".join(POLICY_KEYS)
        raise ConfigValidationError(f"Unknown config key '{key}' (expected one of: {known})")
    if key == "fileExtensions":
        return parse_extensions(value)
    if key in ("warnOnly", "hasLineDetails"):
        return parse_bool_answer(value, key)
    return split_list(value)


def _dedupe(tokens: Any) -> list[str]:
    seen: list[str] = []
    for token in tokens:
        if token and token not in seen:
            seen.append(token)
    return seen


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class ConfigStore:
    """Loads, validates and persists the ScanPolicy file."""

    def __init__(self, settings: GuardSettings) -> None:
        self.settings = settings

    @property
    def path(self) -> Path:
        return self.settings.config_path

    @property
    def is_yaml(self) -> bool:
        return self.path.suffix.lower() in _YAML_SUFFIXES

    def load(self) -> ScanPolicy | None:
        """Load the policy, or return None if it is missing or malformed."""
        if not self.path.exists():
            return None

        try:
            text = self.path.read_text(encoding="utf-8")
            raw = yaml.safe_load(text) if self.is_yaml else json.loads(text)
            return ScanPolicy.from_dict(raw)
        except (OSError, ValueError, yaml.YAMLError, ConfigValidationError) as e:
            print(f"Invalid config file {self.path} ({e}), creating new one", file=sys.stderr)
            return None

    def render(self, policy: ScanPolicy) -> str:
        if self.is_yaml:
            return yaml.safe_dump(policy.to_dict(), sort_keys=False)
        return json.dumps(policy.to_dict(), indent=2) + "\n"

    def save(self, policy: ScanPolicy) -> bool:
        """Write the whole policy. Returns False if the file could not be written."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(self.render(policy), encoding="utf-8")
        except OSError as e:
            print(f"Failed to create config file {self.path}: {e}", file=sys.stderr)
            return False
        print(f"Saved config to {self.path}", file=sys.stderr)
        return True

    def patch(self, key: str, value: Any) -> ScanPolicy:
        """Replace a single persisted key and write the policy back.

        Raises:
            NoExistingConfig: If there is no valid policy to patch.
            ConfigValidationError: If the key is unknown or the result is invalid.
        """
        current = self.load()
        if current is None:
            raise NoExistingConfig(f"No valid config found at {self.path}")
        if key not in POLICY_KEYS:
            raise ConfigValidationError(f"Unknown config key '{key}'")

        raw = current.to_dict()
        raw[key] = list(value) if isinstance(value, (list, tuple)) else value
        updated = ScanPolicy.from_dict(raw)
        if not self.save(updated):
            raise PrintGuardError(f"Could not write {self.path}")
        return updated

    def prompt_new_policy(self, prompter: Prompter | None = None) -> ScanPolicy:
        """Interactively build a new policy.

        Raises:
            ConfigValidationError: On invalid answers or closed input.
        """
        try:
            answers = collect_setup_answers(prompter)
        except EOFError as e:
            raise ConfigValidationError("Setup needs interactive input, but stdin is closed") from e
        return normalize_answers(**answers)

