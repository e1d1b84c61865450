"""Writes per-module `config.yaml` files from the collected install answers."""

from pathlib import Path
from typing import Any, Dict, List, TYPE_CHECKING

import yaml

from pr_review.core.paths import to_posix

if TYPE_CHECKING:
    from .installer import InstallConfig


def _dump(data: Dict[str, Any]) -> str:
    return yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False, width=1000)


def core_config(config: "InstallConfig") -> Dict[str, Any]:
    return {
        "user_name": config.user_name or "Reviewer",
        "communication_language": config.communication_language or "English",
        "output_folder": config.output_folder or "_prr-output",
    }


def prr_config(config: "InstallConfig") -> Dict[str, Any]:
    output_abs = config.project_dir / (config.output_folder or "_prr-output")
    return {
        **core_config(config),
        "project_name": config.project_name or config.project_dir.name,
        "target_repo": config.target_repo or ".",
        "platform": config.platform or "auto",
        "platform_repo": config.github_repo or "",
        "review_output": to_posix(output_abs / "reviews"),
    }


def write_configs(prr_dir: Path, config: "InstallConfig", modules: List[str]) -> List[Path]:
    """Write core config always, prr config when the prr module is installed."""
    written = []
    core_path = prr_dir / "core" / "config.yaml"
    core_path.parent.mkdir(parents=True, exist_ok=True)
    core_path.write_text(_dump(core_config(config)), encoding="utf-8")
    written.append(core_path)

    if "prr" in modules:
        prr_path = prr_dir / "prr" / "config.yaml"
        prr_path.parent.mkdir(parents=True, exist_ok=True)
        prr_path.write_text(_dump(prr_config(config)), encoding="utf-8")
        written.append(prr_path)
    return written


def load_configs(prr_dir: Path) -> Dict[str, Any]:
    """Merged values of existing core and prr configs (prr wins); unreadable files are ignored."""
    values: Dict[str, Any] = {}
    for path in (prr_dir / "core" / "config.yaml", prr_dir / "prr" / "config.yaml"):
        if not path.is_file():
            continue
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError, UnicodeDecodeError):
            continue
        if isinstance(data, dict):
            values.update(data)
    return values


# config.yaml key -> InstallConfig field
SAVED_FIELDS = {
    "user_name": "user_name",
    "communication_language": "communication_language",
    "output_folder": "output_folder",
    "target_repo": "target_repo",
    "platform_repo": "github_repo",
    "project_name": "project_name",
    "platform": "platform",
}
