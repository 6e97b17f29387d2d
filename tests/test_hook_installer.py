"""Tests for pre-commit hook installation."""

import os
import stat
import subprocess
from unittest.mock import MagicMock

import pytest

from printguard.config import GuardSettings
from printguard.errors import HookInstallError, RootResolutionError
from printguard.hook_installer import (
    MANAGED_MARKER,
    HookInstaller,
    build_hook_script,
    next_backup_name,
)
from printguard.workspace import WorkspaceInspector

FOREIGN_HOOK = "#!/bin/sh\necho 'lint ok'\nexit 0\n"


@pytest.fixture
def hooks_dir(tmp_path):
    path = tmp_path / ".git" / "hooks"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def inspector(tmp_path, hooks_dir):
    fake = MagicMock()
    fake.resolve_root.return_value = str(tmp_path)
    fake.resolve_hooks_dir.return_value = str(hooks_dir)
    return fake


def _is_executable(path):
    return bool(path.stat().st_mode & stat.S_IXUSR)


class TestBuildHookScript:
    def test_runs_printguard_with_terminal_stdin(self):
        script = build_hook_script("/usr/bin/python3")
        assert script.startswith("#!/bin/sh\n")
        assert MANAGED_MARKER in script
        assert "/usr/bin/python3 -m printguard check < /dev/tty" in script

    def test_quotes_interpreter_path(self):
        script = build_hook_script("/opt/my python/bin/python")
        assert "'/opt/my python/bin/python' -m printguard check" in script

    def test_chains_previous_hook(self):
        script = build_hook_script("python3", "pre-commit.old")
        assert "# previous-hook: pre-commit.old" in script
        assert 'PREVIOUS_HOOK="$HOOK_DIR/pre-commit.old"' in script
        assert "exit $STATUS" in script
        assert script.index("pre-commit.old") < script.index("-m printguard")

    def test_passes_custom_config_path(self):
        script = build_hook_script("python3", config_path="/work/my repo/guard.yml")
        assert "python3 -m printguard check --config '/work/my repo/guard.yml' < /dev/tty" in script

    def test_default_config_adds_no_option(self):
        assert "--config" not in build_hook_script("python3")

    def test_no_chain_without_previous_hook(self):
        assert "PREVIOUS_HOOK" not in build_hook_script("python3")


class TestNextBackupName:
    def test_first_backup(self):
        assert next_backup_name(["pre-commit", "pre-push.sample"]) == "pre-commit.old"

    def test_numbered_backup(self):
        assert next_backup_name(["pre-commit", "pre-commit.old"]) == "pre-commit1.old"
        assert next_backup_name(["pre-commit.old", "pre-commit1.old"]) == "pre-commit2.old"

    def test_never_reuses_existing_name(self):
        assert next_backup_name(["pre-commit1.old"]) == "pre-commit2.old"


class TestInstall:
    def test_creates_executable_hook(self, inspector, hooks_dir):
        result = HookInstaller(inspector, python_executable="python3").install()
        hook = hooks_dir / "pre-commit"
        assert result.hook_path == str(hook)
        assert result.backup_name is None
        assert _is_executable(hook)
        assert "python3 -m printguard check < /dev/tty" in hook.read_text()

    def test_hook_carries_config_path(self, inspector, hooks_dir, tmp_path):
        config = tmp_path / "conf" / "guard.json"
        HookInstaller(inspector, python_executable="python3", config_path=config).install()
        assert f"check --config {config} < /dev/tty" in (hooks_dir / "pre-commit").read_text()

    def test_creates_missing_hooks_dir(self, tmp_path):
        hooks = tmp_path / "custom-hooks"
        fake = MagicMock()
        fake.resolve_root.return_value = str(tmp_path)
        fake.resolve_hooks_dir.return_value = str(hooks)
        HookInstaller(fake, python_executable="python3").install()
        assert (hooks / "pre-commit").exists()

    def test_backs_up_foreign_hook_unmodified(self, inspector, hooks_dir, capsys):
        (hooks_dir / "pre-commit").write_text(FOREIGN_HOOK)
        result = HookInstaller(inspector, python_executable="python3").install()
        assert result.backup_name == "pre-commit.old"
        assert (hooks_dir / "pre-commit.old").read_text() == FOREIGN_HOOK
        new_hook = (hooks_dir / "pre-commit").read_text()
        assert "pre-commit.old" in new_hook
        assert _is_executable(hooks_dir / "pre-commit")
        assert "renamed to pre-commit.old" in capsys.readouterr().err

    def test_existing_backups_are_kept(self, inspector, hooks_dir):
        (hooks_dir / "pre-commit.old").write_text("first\n")
        (hooks_dir / "pre-commit").write_text(FOREIGN_HOOK)
        result = HookInstaller(inspector, python_executable="python3").install()
        assert result.backup_name == "pre-commit1.old"
        assert (hooks_dir / "pre-commit.old").read_text() == "first\n"
        assert (hooks_dir / "pre-commit1.old").read_text() == FOREIGN_HOOK

    def test_reinstall_is_idempotent(self, inspector, hooks_dir):
        (hooks_dir / "pre-commit").write_text(FOREIGN_HOOK)
        installer = HookInstaller(inspector, python_executable="python3")
        installer.install()
        first = (hooks_dir / "pre-commit").read_text()
        result = installer.install()
        assert result.backup_name is None
        assert result.previous_hook == "pre-commit.old"
        assert (hooks_dir / "pre-commit").read_text() == first
        assert sorted(os.listdir(hooks_dir)) == ["pre-commit", "pre-commit.old"]

    def test_root_failure_raises_install_error(self, inspector):
        inspector.resolve_root.side_effect = RootResolutionError("no root")
        with pytest.raises(HookInstallError, match="no root"):
            HookInstaller(inspector).install()

    def test_unwritable_hooks_dir_raises_install_error(self, tmp_path):
        blocker = tmp_path / "hooks-file"
        blocker.write_text("")
        fake = MagicMock()
        fake.resolve_root.return_value = str(tmp_path)
        fake.resolve_hooks_dir.return_value = str(blocker)
        with pytest.raises(HookInstallError):
            HookInstaller(fake).install()


class TestInstalledHookRuns:
    def test_failing_previous_hook_fails_commit(self, git_repo):
        hooks = git_repo / ".git" / "hooks"
        hooks.mkdir(parents=True, exist_ok=True)
        previous = hooks / "pre-commit"
        previous.write_text("#!/bin/sh\nexit 3\n")
        previous.chmod(0o755)

        installer = HookInstaller(WorkspaceInspector(GuardSettings(workdir=git_repo)), python_executable="python3")
        result = installer.install()

        assert result.backup_name == "pre-commit.old"
        assert _is_executable(hooks / "pre-commit")
        completed = subprocess.run(["sh", str(hooks / "pre-commit")], cwd=git_repo)
        assert completed.returncode == 3
