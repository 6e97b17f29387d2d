"""Core PrintGuard engine: verifies the repo, obtains the policy, scans, decides."""

from __future__ import annotations

import sys

from printguard.config import ConfigStore, GuardSettings
from printguard.errors import (
    ChangeListingError,
    ConfigValidationError,
    HookInstallError,
    RootResolutionError,
    ScanExecutionError,
)
from printguard.hook_installer import HookInstaller
from printguard.models import Action, ChangeKind, Match, ScanPolicy, Verdict
from printguard.prompts import Prompter, confirm_proceed
from printguard.reporters.text_reporter import TextReporter
from printguard.scanner import PatternScanner
from printguard.workspace import WorkspaceInspector, filter_by_extension

NOT_A_REPO_MESSAGE = "Error: No git repository found in your current working directory"


def decide(policy: ScanPolicy, matches: list[Match]) -> Action:
    """Map a policy and its matches to an action, before any confirmation."""
    if not matches:
        return Action.PASS
    if policy.warn_only:
        return Action.WARN
    return Action.BLOCK


class PrintGuardEngine:
    """Runs one pre-commit check from repo verification to the final verdict.

    Each collaborator can be injected; by default they are built from the
    same ``GuardSettings``.
    """

    def __init__(
        self,
        settings: GuardSettings,
        inspector: WorkspaceInspector | None = None,
        store: ConfigStore | None = None,
        scanner: PatternScanner | None = None,
        installer: HookInstaller | None = None,
        prompter: Prompter | None = None,
        reporter: TextReporter | None = None,
    ) -> None:
        self.settings = settings
        self.inspector = inspector or WorkspaceInspector(settings)
        self.store = store or ConfigStore(settings)
        self.scanner = scanner or PatternScanner(settings)
        self.installer = installer or HookInstaller(self.inspector, config_path=settings.custom_config_path)
        self.prompter = prompter
        self.reporter = reporter or TextReporter()

    def run(self) -> Verdict:
        """Run the check and return the verdict; ``exit_code`` is the process status."""
        if not self.inspector.is_version_controlled():
            print(NOT_A_REPO_MESSAGE, file=sys.stderr)
            return Verdict(action=Action.BLOCK, exit_code=1, reason="not a git repository")

        try:
            policy = self.obtain_policy()
        except ConfigValidationError as e:
            print(f"Error: {e}", file=sys.stderr)
            return Verdict(action=Action.BLOCK, exit_code=1, reason=f"invalid configuration: {e}")

        try:
            root = self.inspector.resolve_root()
            changes = self.inspector.list_staged_changes(root)
        except (RootResolutionError, ChangeListingError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return Verdict(action=Action.BLOCK, exit_code=1, reason=str(e))

        staged = [c for c in changes if c.kind is not ChangeKind.DELETED]
        files = filter_by_extension(staged, policy.file_extensions)

        try:
            matches = self.scanner.scan(
                files,
                policy.search_terms,
                policy.has_line_details,
                policy.files_to_exclude,
                root=root,
            )
        except ScanExecutionError as e:
            print(f"Error: {e}", file=sys.stderr)
            return Verdict(action=Action.BLOCK, exit_code=1, reason=str(e))

        return self.apply_outcome(policy, matches)

    def obtain_policy(self) -> ScanPolicy:
        """Load the policy, or run first-time setup (hook install + questions).

        Raises:
            ConfigValidationError: If the setup answers are invalid.
        """
        policy = self.store.load()
        if policy is not None:
            return policy

        try:
            self.installer.install()
        except HookInstallError as e:
            print(f"warning: could not install pre-commit hook: {e}", file=sys.stderr)

        policy = self.store.prompt_new_policy(self.prompter)
        if not self.store.save(policy):
            print("warning: continuing with an unsaved configuration", file=sys.stderr)
        return policy

    def apply_outcome(self, policy: ScanPolicy, matches: list[Match]) -> Verdict:
        action = decide(policy, matches)
        if action is Action.PASS:
            return Verdict(action=Action.PASS, exit_code=0, reason="no matches")

        self.reporter.emit(matches)

        if action is Action.WARN:
            if confirm_proceed(self.prompter):
                return Verdict(action=Action.WARN, exit_code=0, reason="confirmed by operator", matches=matches)
            print("Commit aborted.", file=sys.stderr)
            return Verdict(action=Action.WARN, exit_code=1, reason="declined by operator", matches=matches)

        print("Commit blocked due to print statements.", file=sys.stderr)
        return Verdict(action=Action.BLOCK, exit_code=1, reason="patterns found", matches=matches)
