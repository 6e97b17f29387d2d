"""Install PrintGuard as the repository's git pre-commit hook."""

from __future__ import annotations

import os
import re
import shlex
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from printguard.errors import HookInstallError, RootResolutionError
from printguard.workspace import WorkspaceInspector

HOOK_NAME = "pre-commit"
MANAGED_MARKER = "# printguard-managed pre-commit hook"

_BACKUP_RE = re.compile(rf"^{re.escape(HOOK_NAME)}\d*\.old$")
_PREVIOUS_RE = re.compile(r"^# previous-hook: (.+)$", re.MULTILINE)


@dataclass
class HookInstallResult:
    hook_path: str
    backup_name: str | None = None
    previous_hook: str | None = None


def build_hook_script(
    python_executable: str,
    previous_hook: str | None = None,
    config_path: str | Path | None = None,
) -> str:
    """Render the pre-commit script.

    The previous hook, if any, runs first and its failure fails the commit.
    PrintGuard then runs with stdin reattached to the terminal so that the
    confirmation prompt works under git; without a terminal the redirection
    fails and so does the commit. A non-default ``config_path`` is passed on
    as ``--config`` so the hook reads the same policy that setup wrote.
    """
    command = f"{shlex.quote(python_executable)} -m printguard check"
    if config_path is not None:
        command += f" --config {shlex.quote(str(config_path))}"
    lines = ["#!/bin/sh", MANAGED_MARKER]
    if previous_hook:
        lines += [
            f"# previous-hook: {previous_hook}",
            "",
            'HOOK_DIR=$(dirname "$0")',
            f'PREVIOUS_HOOK="$HOOK_DIR/{previous_hook}"',
            'if [ -x "$PREVIOUS_HOOK" ]; then',
            '  "$PREVIOUS_HOOK" "$@"',
            "  STATUS=$?",
            "  if [ $STATUS -ne 0 ]; then",
            "    exit $STATUS",
            "  fi",
            "fi",
        ]
    lines += [
        "",
        f"{command} < /dev/tty",
        "exit $?",
        "",
    ]
    return "\n".join(lines)


def next_backup_name(existing_names: Iterable[str]) -> str:
    """Pick ``pre-commit.old`` or ``pre-commit<N>.old`` for the next backup.

    ``N`` is the number of backups already present; it is bumped further if
    that name is taken, so a backup is never overwritten.
    """
    names = set(existing_names)
    index = sum(1 for name in names if _BACKUP_RE.match(name))
    while True:
        candidate = f"{HOOK_NAME}.old" if index == 0 else f"{HOOK_NAME}{index}.old"
        if candidate not in names:
            return candidate
        index += 1


class HookInstaller:
    """Writes the pre-commit gate, keeping any foreign hook as a numbered backup."""

    def __init__(
        self,
        inspector: WorkspaceInspector,
        python_executable: str | None = None,
        config_path: str | Path | None = None,
    ) -> None:
        self.inspector = inspector
        self.python_executable = python_executable or sys.executable
        self.config_path = config_path

    def install(self) -> HookInstallResult:
        """Install or refresh the hook.

        A hook already written by PrintGuard is rewritten in place and keeps
        its chain target; any other hook is renamed to a backup first.

        Raises:
            HookInstallError: If the hooks directory or script cannot be written.
        """
        try:
            root = self.inspector.resolve_root()
        except RootResolutionError as e:
            raise HookInstallError(str(e)) from e

        hooks_dir = Path(self.inspector.resolve_hooks_dir(root))
        hook_path = hooks_dir / HOOK_NAME
        backup_name: str | None = None
        previous_hook: str | None = None

        try:
            hooks_dir.mkdir(parents=True, exist_ok=True)
            existing = hook_path.read_text(encoding="utf-8", errors="replace") if hook_path.is_file() else None
            if existing is not None and MANAGED_MARKER in existing:
                found = _PREVIOUS_RE.search(existing)
                previous_hook = found.group(1).strip() if found else None
            elif existing is not None:
                backup_name = next_backup_name(os.listdir(hooks_dir))
                hook_path.rename(hooks_dir / backup_name)
                previous_hook = backup_name
                print(f"Existing pre-commit hook renamed to {backup_name}", file=sys.stderr)

            script = build_hook_script(self.python_executable, previous_hook, self.config_path)
            hook_path.write_text(script, encoding="utf-8")
            hook_path.chmod(0o755)
        except OSError as e:
            raise HookInstallError(f"could not write {hook_path}: {e}") from e

        if previous_hook:
            print(f"Created pre-commit hook at {hook_path} (chains {previous_hook})", file=sys.stderr)
        else:
            print(f"Created pre-commit hook at {hook_path}", file=sys.stderr)
        return HookInstallResult(hook_path=str(hook_path), backup_name=backup_name, previous_hook=previous_hook)
