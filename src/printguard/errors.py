"""Exception types raised by PrintGuard components."""

from __future__ import annotations


class PrintGuardError(Exception):
    """Base class for all PrintGuard errors."""


class NotARepositoryError(PrintGuardError):
    """The current directory is not inside a git working tree."""


class ConfigValidationError(PrintGuardError):
    """A policy answer or stored policy value is invalid."""


# Short name used by the interactive setup callers.
ValidationError = ConfigValidationError


class NoExistingConfig(PrintGuardError):
    """A patch was requested but no valid policy file exists."""


class RootResolutionError(PrintGuardError):
    """``git rev-parse --show-toplevel`` failed."""


class ChangeListingError(PrintGuardError):
    """The staged change listing could not be obtained."""


class ScanExecutionError(PrintGuardError):
    """``git grep`` could not run (raised only in strict scan mode)."""


class HookInstallError(PrintGuardError):
    """The pre-commit hook could not be written."""
