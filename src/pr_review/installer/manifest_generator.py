"""
CSV manifests of the installed artifacts, in `<prr>/_config/`:
workflow-manifest.csv, agent-manifest.csv, task-manifest.csv
"""

import csv
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pr_review.core.documents import discover_artifacts
from pr_review.core.paths import PRR_FOLDER_NAME, join_posix, module_order, to_posix

WORKFLOW_FIELDS = ["module", "name", "description", "path"]
AGENT_FIELDS = ["module", "name", "title", "icon", "capabilities", "path"]
TASK_FIELDS = ["module", "name", "path"]

TASK_PATTERNS = ("**/*.md", "**/*.xml")


def clean_for_csv(text: Optional[str]) -> str:
    if not text:
        return ""
    return re.sub(r"\s+", " ", str(text).strip())


def _write_csv(path: Path, fields: List[str], rows: Iterable[Dict[str, str]]) -> int:
    count = 0
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(fields)
        for row in rows:
            writer.writerow([clean_for_csv(row.get(name)) for name in fields])
            count += 1
    return count


def collect_tasks(prr_dir: Path, module: str, prr_folder_name: str) -> List[Dict[str, str]]:
    tasks_dir = prr_dir / module / "tasks"
    if not tasks_dir.is_dir():
        return []
    files = sorted(
        {p for pattern in TASK_PATTERNS for p in tasks_dir.glob(pattern) if p.is_file()},
        key=lambda p: to_posix(p.relative_to(tasks_dir)),
    )
    return [
        {
            "module": module,
            "name": p.stem,
            "path": join_posix(prr_folder_name, module, "tasks", to_posix(p.relative_to(tasks_dir))),
        }
        for p in files
    ]


def generate_manifests(
    prr_dir: Path, selected_modules: Optional[Iterable[str]] = None, prr_folder_name: str = PRR_FOLDER_NAME
) -> Dict[str, int]:
    """Write the three CSV manifests and return row counts per kind."""
    cfg_dir = prr_dir / "_config"
    cfg_dir.mkdir(parents=True, exist_ok=True)

    workflows: List[Dict[str, str]] = []
    agents: List[Dict[str, str]] = []
    for artifact_set in discover_artifacts(prr_dir, selected_modules):
        for wf in artifact_set.workflows:
            workflows.append({
                "module": wf.module,
                "name": wf.name,
                "description": wf.description,
                "path": join_posix(prr_folder_name, wf.source_path),
            })
        for agent in artifact_set.agents:
            agents.append({
                "module": agent.module,
                "name": agent.name,
                "title": agent.title,
                "icon": agent.icon or "🔍",
                "capabilities": agent.capabilities or "",
                "path": join_posix(prr_folder_name, agent.source_path),
            })

    tasks: List[Dict[str, str]] = []
    for module in module_order(selected_modules):
        tasks.extend(collect_tasks(prr_dir, module, prr_folder_name))

    return {
        "workflows": _write_csv(cfg_dir / "workflow-manifest.csv", WORKFLOW_FIELDS, workflows),
        "agents": _write_csv(cfg_dir / "agent-manifest.csv", AGENT_FIELDS, agents),
        "tasks": _write_csv(cfg_dir / "task-manifest.csv", TASK_FIELDS, tasks),
    }
