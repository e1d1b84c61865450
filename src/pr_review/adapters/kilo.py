"""
KiloCoder adapter — custom modes in .kilocodemodes + workflow launchers.

Output: .kilocodemodes (customModes entries with slug prr-*),
.kilocode/workflows/prr-<leaf>.md
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from pr_review.core.adapter import BaseAdapter
from pr_review.core.documents import render_frontmatter
from pr_review.core.paths import NAMESPACE_PREFIX, join_posix, prefixed
from pr_review.core.types import AgentDocument, InstallResult, SetupOptions, WorkflowDocument

MODES_FILE = ".kilocodemodes"
MODE_GROUPS = ["read", "edit", "browser", "command", "mcp"]


def is_owned_mode(mode: Any) -> bool:
    return isinstance(mode, dict) and str(mode.get("slug") or "").startswith(NAMESPACE_PREFIX)


def read_modes(path: Path) -> Optional[Dict[str, Any]]:
    """Parsed modes document, or None when it is missing or unparseable."""
    if not path.is_file():
        return None
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, UnicodeDecodeError):
        return None
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def dump_modes(data: Dict[str, Any]) -> str:
    return yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False, width=1000)


class KiloAdapter(BaseAdapter):
    key = "kilo"
    display_name = "KiloCoder"

    def _modes_path(self, project_dir: Path) -> Path:
        return project_dir / MODES_FILE

    def _workflows_dir(self, project_dir: Path) -> Path:
        return project_dir / ".kilocode" / "workflows"

    def setup(self, project_dir: Path, artifacts_dir: Path, options: Optional[SetupOptions] = None) -> InstallResult:
        options = options or SetupOptions()
        result = InstallResult()
        self.cleanup(project_dir, options)

        modes_path = self._modes_path(project_dir)
        config = read_modes(modes_path) or {}
        if not isinstance(config.get("customModes"), list):
            config["customModes"] = []

        workflows_dir = self._workflows_dir(project_dir)
        workflows_dir.mkdir(parents=True, exist_ok=True)

        for artifact_set in self._collect(artifacts_dir, options, result):
            for agent in artifact_set.agents:
                if agent.no_launcher:
                    continue
                config["customModes"].append(self.build_mode(agent))
                result.agents += 1

            for workflow in artifact_set.workflows:
                file_name = prefixed(f"{workflow.leaf_dir}.md")
                self._write(workflows_dir / file_name, self.render_workflow(workflow))
                result.files.append(f".kilocode/workflows/{file_name}")
                result.workflows += 1

        self._write(modes_path, dump_modes(config))
        result.files.append(MODES_FILE)
        return result

    def build_mode(self, agent: AgentDocument) -> Dict[str, Any]:
        rel_path = join_posix(self.prr_folder_name, agent.source_path)
        return {
            "slug": prefixed(f"{agent.module}-{agent.stem}"),
            "name": agent.name,
            "roleDefinition": agent.description,
            "whenToUse": f"Use for {agent.name} tasks",
            "customInstructions": (
                f"Read the full agent file from {{project-root}}/{rel_path} "
                "and follow all activation instructions exactly.\n"
            ),
            "groups": list(MODE_GROUPS),
        }

    def render_workflow(self, workflow: WorkflowDocument) -> str:
        rel_path = join_posix(self.prr_folder_name, workflow.source_path)
        frontmatter = render_frontmatter({
            "name": prefixed(workflow.leaf_dir),
            "description": workflow.description or workflow.name,
            "disable-model-invocation": True,
        })
        return (
            f"{frontmatter}\n"
            f"IT IS CRITICAL THAT YOU FOLLOW THIS COMMAND: LOAD the FULL @{{project-root}}/{rel_path}, "
            "READ its entire contents and follow its directions exactly!\n"
        )

    def cleanup(self, project_dir: Path, options: Optional[SetupOptions] = None) -> None:
        modes_path = self._modes_path(project_dir)
        config = read_modes(modes_path)
        # Unparseable or foreign-shaped documents are left exactly as found.
        if config is not None and isinstance(config.get("customModes"), list):
            modes: List[Any] = config["customModes"]
            kept = [mode for mode in modes if not is_owned_mode(mode)]
            if len(kept) != len(modes):
                config["customModes"] = kept
                self._write(modes_path, dump_modes(config))

        self._sweep_prefixed(self._workflows_dir(project_dir))

    def detect(self, project_dir: Path) -> bool:
        config = read_modes(self._modes_path(project_dir))
        if config and isinstance(config.get("customModes"), list):
            return any(is_owned_mode(mode) for mode in config["customModes"])
        return False
