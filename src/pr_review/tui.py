"""
Interactive prompts for `pr-review install` / `pr-review uninstall`.

Every prompt is skipped when its CLI flag is given or `--yes` is set.
"""

from pathlib import Path
from typing import Optional

import questionary
from questionary import Separator, Style

from pr_review.core.paths import DEFAULT_MODULES
from pr_review.installer import InstallConfig, detect
from pr_review.utils import Colors, get_system_username, parse_list, resolve_directory

CUSTOM_STYLE = Style(
    [
        ("qmark", "fg:#00d4ff bold"),
        ("question", "bold"),
        ("answer", "fg:#00d4ff bold"),
        ("pointer", "fg:#00d4ff bold"),
        ("highlighted", "fg:#00d4ff bold bg:default"),
        ("selected", "fg:#00d4ff bold bg:default"),
        ("checkbox", "fg:#888888"),
        ("checkbox-selected", "fg:#00d4ff bold"),
    ]
)


def _ask(message: str, default: str) -> str:
    answer = questionary.text(message, default=default, style=CUSTOM_STYLE).ask()
    return answer or default


def _value(cli_value: Optional[str], yes: bool, message: str, default: str) -> str:
    if cli_value:
        return cli_value
    if yes:
        return default
    return _ask(message, default)


def _select_action(version: str) -> Optional[str]:
    return questionary.select(
        f"PR Review v{version} is already installed. What would you like to do?",
        choices=[
            questionary.Choice("Full Update - reinstall all modules", value="update"),
            questionary.Choice("Quick Update - refresh files, keep settings", value="quick-update"),
            Separator(),
            questionary.Choice("Cancel", value="cancel"),
        ],
        style=CUSTOM_STYLE,
    ).ask()


def default_ides(registry, project_dir: Path) -> list:
    """Preferred IDEs plus any the project is already configured for."""
    detected = set(registry.detect_installed(project_dir))
    return [info.key for info in registry.get_available() if info.preferred or info.key in detected]


def _select_ides(registry, project_dir: Path) -> list:
    defaults = default_ides(registry, project_dir)
    choices = [
        questionary.Choice(
            f"{info.checkbox_label} (recommended)" if info.preferred else info.checkbox_label,
            value=info.key,
            checked=info.key in defaults,
        )
        for info in registry.get_available()
    ]
    selected = questionary.checkbox(
        "Which IDEs should PR Review be configured for?",
        choices=choices,
        style=CUSTOM_STYLE,
    ).ask()
    return selected or []


def _select_codex_location() -> str:
    location = questionary.select(
        "Where should Codex prompts be installed?",
        choices=[
            questionary.Choice("Global (~/.codex/prompts)", value="global"),
            questionary.Choice("Project (.codex/prompts)", value="project"),
        ],
        style=CUSTOM_STYLE,
    ).ask()
    return location or "global"


def prompt_install(args, registry) -> Optional[InstallConfig]:
    """
    Build an InstallConfig from CLI args, asking for anything missing.

    Returns:
        InstallConfig, or None if the user cancelled
    """
    yes = getattr(args, "yes", False)
    project_dir = resolve_directory(getattr(args, "directory", None))

    existing = detect(project_dir)
    action = getattr(args, "action", None)
    if existing.installed and not action:
        action = "update" if yes else _select_action(existing.version)
    action = action or "install"
    if action == "cancel":
        return None
    if action == "quick-update":
        return InstallConfig(project_dir=project_dir, action_type=action)

    user_name = _value(getattr(args, "user_name", None), yes, "What should reviewers call you?", get_system_username())
    language = _value(getattr(args, "communication_language", None), yes, "Language for reviewer agents?", "English")
    output_folder = _value(
        getattr(args, "output_folder", None), yes, "Output folder (relative to project root)?", "_prr-output"
    )
    target_repo = _value(getattr(args, "target_repo", None), yes, "Path to the git repo to review?", ".")
    github_repo = getattr(args, "github_repo", None) or ""
    if not github_repo and not yes:
        github_repo = questionary.text(
            "GitHub repo for posting comments? (owner/repo, blank to skip)", default="", style=CUSTOM_STYLE
        ).ask() or ""

    modules = parse_list(getattr(args, "modules", None)) or list(DEFAULT_MODULES)

    tools = getattr(args, "tools", None)
    if tools == "none":
        ides = []
    elif tools:
        ides = parse_list(tools)
    elif yes:
        ides = default_ides(registry, project_dir)
    else:
        ides = _select_ides(registry, project_dir)

    install_location = getattr(args, "codex_location", None)
    if not install_location:
        install_location = "global" if yes or "codex" not in ides else _select_codex_location()

    print(f"{Colors.CYAN}Configuration complete - starting installation...{Colors.ENDC}\n")
    return InstallConfig(
        project_dir=project_dir,
        modules=modules,
        ides=ides,
        user_name=user_name,
        communication_language=language,
        output_folder=output_folder,
        target_repo=target_repo,
        github_repo=github_repo,
        install_location=install_location,
        action_type=action,
    )


def confirm_uninstall(project_dir: Path) -> bool:
    return bool(
        questionary.confirm(f"Remove PR Review from {project_dir}?", default=False, style=CUSTOM_STYLE).ask()
    )
