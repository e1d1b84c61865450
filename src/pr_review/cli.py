"""
CLI entry point — thin dispatcher only.

Parse args -> call installer -> print result.
"""

import argparse
import sys

from pr_review import __version__
from pr_review.utils import Colors, resolve_directory


def main():
    try:
        sys.exit(_main())
    except KeyboardInterrupt:
        print(f"\n{Colors.YELLOW}Cancelled.{Colors.ENDC}")
        sys.exit(130)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pr-review",
        description="PR Review Kit - AI-driven code review agent system",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", help="Command")

    # --- install ---
    p_install = sub.add_parser("install", help="Install PR Review agents and workflows into your project")
    p_install.add_argument("--directory", help="Installation directory (default: current directory)")
    p_install.add_argument("--modules", help='Comma-separated module IDs to install (e.g. "prr")')
    p_install.add_argument(
        "--tools", help='Comma-separated IDE IDs to configure (e.g. "claude-code,cursor"). Use "none" to skip.'
    )
    p_install.add_argument("--action", choices=["install", "update", "quick-update"], help="Action type")
    p_install.add_argument("--user-name", help="Name for agents to use")
    p_install.add_argument("--communication-language", help="Language for agent communication (default: English)")
    p_install.add_argument("--output-folder", help="Output folder relative to project root (default: _prr-output)")
    p_install.add_argument("--target-repo", help="Path to git repository to review (default: .)")
    p_install.add_argument("--github-repo", help="GitHub repository for posting comments (owner/repo)")
    p_install.add_argument("--codex-location", choices=["global", "project"], help="Where Codex prompts go")
    p_install.add_argument("--yes", "-y", action="store_true", help="Accept all defaults and skip prompts")
    p_install.add_argument("--quiet", "-q", action="store_true", help="Only print the final result")

    # --- status ---
    p_status = sub.add_parser("status", help="Show current PR Review installation status")
    p_status.add_argument("--directory", help="Project directory (default: current directory)")

    # --- uninstall ---
    p_uninstall = sub.add_parser("uninstall", help="Remove PR Review installation from a project")
    p_uninstall.add_argument("--directory", help="Project directory (default: current directory)")
    p_uninstall.add_argument("--yes", "-y", action="store_true", help="Skip confirmation prompt")

    # --- list ---
    sub.add_parser("list", help="List supported IDEs")

    return parser


def _main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    if args.command == "install":
        return _handle_install(args)
    if args.command == "status":
        return _handle_status(args)
    if args.command == "uninstall":
        return _handle_uninstall(args)
    if args.command == "list":
        return _handle_list()
    parser.print_help()
    return 0


def _handle_install(args) -> int:
    from pr_review.core.registry import adapter_registry
    from pr_review.installer import Installer
    from pr_review.tui import prompt_install

    print(f"{Colors.HEADER}PR Review - AI-driven Code Review Framework{Colors.ENDC}\n")
    config = prompt_install(args, adapter_registry)
    if config is None:
        print(f"{Colors.YELLOW}Installation cancelled.{Colors.ENDC}")
        return 0

    installer = Installer(adapter_registry, verbose=not args.quiet)
    try:
        if config.action_type == "quick-update":
            summary = installer.quick_update(config)
            print(f"{Colors.GREEN}Quick update complete!{Colors.ENDC}")
            print(f"Updated {len(summary.modules)} modules ({', '.join(summary.modules)})")
        else:
            summary = installer.install(config)
    except (ValueError, OSError) as e:
        print(f"{Colors.RED}Installation failed: {e}{Colors.ENDC}")
        return 1

    if not summary.ok:
        return 1
    print(f"{Colors.CYAN}Open your AI IDE and use the reviewer agents to start reviewing PRs.{Colors.ENDC}")
    return 0


def _handle_status(args) -> int:
    from pr_review.installer import Installer

    project_dir = resolve_directory(args.directory)
    status = Installer(verbose=False).status(project_dir)

    if not status.installed:
        print(f"{Colors.YELLOW}PR Review is not installed in this directory.{Colors.ENDC}")
        print("Run `pr-review install` to get started.")
        return 0

    print(f"{Colors.GREEN}PR Review v{status.version} installed{Colors.ENDC}")
    print(f"  Modules: {', '.join(status.modules)}")
    print(f"  IDEs configured: {', '.join(status.ides) or 'none'}")
    print(f"  Install date: {status.install_date}")
    return 0


def _handle_uninstall(args) -> int:
    from pr_review.installer import Installer
    from pr_review.tui import confirm_uninstall

    project_dir = resolve_directory(args.directory)
    if not args.yes and not confirm_uninstall(project_dir):
        print(f"{Colors.YELLOW}Uninstall cancelled.{Colors.ENDC}")
        return 0

    try:
        results = Installer().uninstall(project_dir)
    except OSError as e:
        print(f"{Colors.RED}Uninstall failed: {e}{Colors.ENDC}")
        return 1

    if any(not r.success for r in results):
        print(f"{Colors.YELLOW}PR Review removed; some IDE launchers could not be cleaned.{Colors.ENDC}")
        return 1
    print(f"{Colors.GREEN}PR Review uninstalled successfully.{Colors.ENDC}")
    return 0


def _handle_list() -> int:
    from pr_review.core.registry import adapter_registry, load_catalog

    print(f"{Colors.BLUE}Supported IDEs:{Colors.ENDC}")
    for info in adapter_registry.get_available():
        marker = f" {Colors.GREEN}(recommended){Colors.ENDC}" if info.preferred else ""
        print(f"  - {info.key}: {info.checkbox_label}{marker}")

    registered = set(adapter_registry.names())
    informational = [
        (code, entry["name"]) for code, entry in load_catalog().items() if str(code).lower() not in registered
    ]
    if informational:
        print(f"\n{Colors.BLUE}Known, without automated setup:{Colors.ENDC}")
        for code, name in informational:
            print(f"  - {code}: {name}")
    return 0
