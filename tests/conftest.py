"""Shared fixtures: a small artifacts tree inside a throwaway project."""

from pathlib import Path
from typing import Any, Dict, Optional

import pytest
import yaml


def write_agent(root: Path, module: str, stem: str, meta: Optional[Dict[str, Any]] = None, body: str = "") -> Path:
    """Write `<root>/<module>/agents/<stem>.md` with YAML frontmatter."""
    path = root / module / "agents" / f"{stem}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    content = ""
    if meta is not None:
        content = "---\n" + yaml.safe_dump(meta, sort_keys=False) + "---\n"
    path.write_text(content + (body or f"# {stem}\n"), encoding="utf-8")
    return path


def write_workflow(root: Path, module: str, rel_dir: str, data: Dict[str, Any], structured: bool = True) -> Path:
    """Write `workflow.yaml` (structured) or `workflow.md` (frontmatter) under `<module>/workflows/<rel_dir>/`."""
    directory = root / module / "workflows" / rel_dir
    directory.mkdir(parents=True, exist_ok=True)
    if structured:
        path = directory / "workflow.yaml"
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    else:
        path = directory / "workflow.md"
        path.write_text("---\n" + yaml.safe_dump(data, sort_keys=False) + "---\n\n# Steps\n", encoding="utf-8")
    return path


def snapshot_tree(root: Path) -> Dict[str, bytes]:
    """Relative posix path -> bytes for every file under ``root``."""
    if not root.exists():
        return {}
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture(autouse=True)
def fake_home(tmp_path, monkeypatch):
    """Codex writes under ~/.codex; keep it inside tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@pytest.fixture
def project_dir(tmp_path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def artifacts_root(project_dir) -> Path:
    """
    `core` with one agent (reviewer.md, name Reviewer) and `prr` with one
    workflow (select-pr/workflow.yaml, name "Select PR").
    """
    root = project_dir / "_prr"
    write_agent(root, "core", "reviewer", {"name": "Reviewer", "description": "Reviews pull requests"})
    write_workflow(root, "prr", "select-pr", {"name": "Select PR", "description": "Pick a PR"})
    return root
