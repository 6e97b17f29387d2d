"""PrintGuard CLI entry point.

Usage:
    printguard [check] [--config PATH] [--strict-scan] [--format text|json] [--output PATH]
    printguard init [--config PATH] [--no-hook]
    printguard install-hook [--config PATH]
    printguard config show [--config PATH]
    printguard config set KEY VALUE [--config PATH]
    python -m printguard [options]
"""

from __future__ import annotations

import argparse
import json
import sys

from printguard.config import POLICY_KEYS, ConfigStore, GuardSettings, parse_value
from printguard.engine import NOT_A_REPO_MESSAGE, PrintGuardEngine
from printguard.errors import ConfigValidationError, HookInstallError, PrintGuardError
from printguard.hook_installer import HookInstaller
from printguard.reporters.json_reporter import JSONReporter
from printguard.workspace import WorkspaceInspector


def _settings(args: argparse.Namespace) -> GuardSettings:
    return GuardSettings.from_args(
        config=getattr(args, "config", None),
        strict_scan=getattr(args, "strict_scan", False),
    )


def check_command(args: argparse.Namespace) -> int:
    """Execute the check command."""
    engine = PrintGuardEngine(_settings(args))
    verdict = engine.run()

    if getattr(args, "format", "text") == "json":
        print(JSONReporter().render(verdict))
    if getattr(args, "output", None):
        JSONReporter().write(verdict, args.output)
        print(f"Verdict written to {args.output}", file=sys.stderr)

    return verdict.exit_code


def init_command(args: argparse.Namespace) -> int:
    """Run interactive setup, save the policy and install the hook."""
    settings = _settings(args)
    inspector = WorkspaceInspector(settings)
    if not inspector.is_version_controlled():
        print(NOT_A_REPO_MESSAGE, file=sys.stderr)
        return 1

    store = ConfigStore(settings)
    try:
        policy = store.prompt_new_policy()
    except ConfigValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if not store.save(policy):
        return 1

    if not getattr(args, "no_hook", False):
        try:
            HookInstaller(inspector, config_path=settings.custom_config_path).install()
        except HookInstallError as e:
            print(f"warning: could not install pre-commit hook: {e}", file=sys.stderr)
    return 0


def install_hook_command(args: argparse.Namespace) -> int:
    """Install or refresh the pre-commit hook only."""
    settings = _settings(args)
    try:
        HookInstaller(WorkspaceInspector(settings), config_path=settings.custom_config_path).install()
    except HookInstallError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def config_command(args: argparse.Namespace) -> int:
    """Show or patch the stored policy."""
    store = ConfigStore(_settings(args))

    if args.config_action == "set":
        try:
            policy = store.patch(args.key, parse_value(args.key, args.value))
        except PrintGuardError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(json.dumps(policy.to_dict(), indent=2))
        return 0

    policy = store.load()
    if policy is None:
        print(f"No valid config found at {store.path}", file=sys.stderr)
        return 1
    print(json.dumps(policy.to_dict(), indent=2))
    return 0


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to the policy file (default: ./print_check_config.json)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="printguard",
        description="PrintGuard: block debug print statements from entering commits",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check subcommand
    check_parser = subparsers.add_parser("check", help="Scan staged changes (default)")
    _add_config_option(check_parser)
    check_parser.add_argument(
        "--strict-scan",
        action="store_true",
        help="Fail the commit if git grep cannot run instead of treating it as no matches",
    )
    check_parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Also print the verdict as JSON on stdout",
    )
    check_parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the JSON verdict to this file",
    )

    # init subcommand
    init_parser = subparsers.add_parser("init", help="Create the policy file and install the hook")
    _add_config_option(init_parser)
    init_parser.add_argument(
        "--no-hook",
        action="store_true",
        default=False,
        help="Skip installing the pre-commit hook",
    )

    # install-hook subcommand
    hook_parser = subparsers.add_parser("install-hook", help="Install the git pre-commit hook")
    _add_config_option(hook_parser)

    # config subcommand
    config_parser = subparsers.add_parser("config", help="Show or change the stored policy")
    config_sub = config_parser.add_subparsers(dest="config_action", required=True)
    show_parser = config_sub.add_parser("show", help="Print the stored policy")
    _add_config_option(show_parser)
    set_parser = config_sub.add_parser("set", help="Change one policy key")
    set_parser.add_argument("key", choices=POLICY_KEYS)
    set_parser.add_argument("value", help="y/n for booleans, comma-separated for lists")
    _add_config_option(set_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in (None, "check"):
        sys.exit(check_command(args))
    elif args.command == "init":
        sys.exit(init_command(args))
    elif args.command == "install-hook":
        sys.exit(install_hook_command(args))
    elif args.command == "config":
        sys.exit(config_command(args))
    else:  # pragma: no cover
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
