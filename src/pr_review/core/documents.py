"""
Artifact discovery — loads agent and workflow documents from an artifacts root.

Layout consumed:
    <root>/<module>/agents/**/*.md
    <root>/<module>/workflows/**/workflow.md     (narrative, metadata in frontmatter)
    <root>/<module>/workflows/**/workflow.yaml   (structured, top-level name/description)

Agent metadata comes from the YAML frontmatter the compiler writes; nothing
is scraped out of the rendered body.
"""

import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from .paths import join_posix, leaf_dir_name, module_order, to_posix
from .types import AgentDocument, ModuleArtifactSet, WorkflowDocument

_RE_FRONTMATTER = re.compile(r"^---\n(.*?)\n---(?:\n|$)", re.DOTALL)

WORKFLOW_FILE_NAMES = ("workflow.md", "workflow.yaml")

# Errors that make a single document unusable; the document is skipped.
DOCUMENT_ERRORS = (OSError, UnicodeDecodeError, yaml.YAMLError, ValueError)


def split_frontmatter(content: str) -> Tuple[Dict[str, Any], str]:
    """
    Split a Markdown document into (frontmatter dict, body).

    A document without a leading ``---`` block has empty metadata.

    Raises:
        yaml.YAMLError: frontmatter is not valid YAML
        ValueError: frontmatter is valid YAML but not a mapping
    """
    normalized = content.replace("\r\n", "\n")
    match = _RE_FRONTMATTER.match(normalized)
    if not match:
        return {}, normalized
    data = yaml.safe_load(match.group(1))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("frontmatter must be a YAML mapping")
    return data, normalized[match.end():]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _is_true(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def load_agent_document(agent_file: Path, artifacts_root: Path, module: str) -> AgentDocument:
    """Build an AgentDocument from a compiled agent file."""
    content = agent_file.read_text(encoding="utf-8")
    meta, _ = split_frontmatter(content)

    rel_in_agents = to_posix(agent_file.relative_to(artifacts_root / module / "agents"))
    name = _as_text(meta.get("name")) or agent_file.stem
    description = _as_text(meta.get("description")) or f"{name} reviewer"
    no_launcher = _is_true(meta.get("no-launcher", meta.get("no_launcher", False)))

    return AgentDocument(
        id=_as_text(meta.get("id")) or agent_file.stem,
        name=name,
        title=_as_text(meta.get("title")) or description,
        icon=_as_text(meta.get("icon")),
        capabilities=_as_text(meta.get("capabilities")) or None,
        no_launcher=no_launcher,
        module=module,
        source_path=join_posix(module, "agents", rel_in_agents),
        description=description,
    )


def load_workflow_document(workflow_file: Path, artifacts_root: Path, module: str) -> WorkflowDocument:
    """Build a WorkflowDocument; name defaults to the containing directory."""
    content = workflow_file.read_text(encoding="utf-8")
    rel_in_workflows = to_posix(workflow_file.relative_to(artifacts_root / module / "workflows"))
    leaf = leaf_dir_name(rel_in_workflows)
    is_structured = workflow_file.suffix == ".yaml"

    if is_structured:
        data = yaml.safe_load(content)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError("workflow.yaml must be a YAML mapping")
    else:
        data, _ = split_frontmatter(content)

    return WorkflowDocument(
        name=_as_text(data.get("name")) or leaf,
        description=_as_text(data.get("description")),
        source_path=join_posix(module, "workflows", rel_in_workflows),
        is_structured=is_structured,
        module=module,
        leaf_dir=leaf or _as_text(data.get("name")),
    )


def _sorted_files(root: Path, pattern: str) -> List[Path]:
    return sorted((p for p in root.glob(pattern) if p.is_file()), key=lambda p: to_posix(p.relative_to(root)))


def iter_agent_files(artifacts_root: Path, module: str) -> List[Path]:
    agents_dir = artifacts_root / module / "agents"
    if not agents_dir.is_dir():
        return []
    return _sorted_files(agents_dir, "**/*.md")


def iter_workflow_files(artifacts_root: Path, module: str) -> List[Path]:
    workflows_dir = artifacts_root / module / "workflows"
    if not workflows_dir.is_dir():
        return []
    files = [p for p in _sorted_files(workflows_dir, "**/workflow.*") if p.name in WORKFLOW_FILE_NAMES]
    return files


def discover_module(artifacts_root: Path, module: str) -> ModuleArtifactSet:
    """Load every agent and workflow of one module, skipping unreadable documents."""
    artifact_set = ModuleArtifactSet(module=module)

    for agent_file in iter_agent_files(artifacts_root, module):
        try:
            artifact_set.agents.append(load_agent_document(agent_file, artifacts_root, module))
        except DOCUMENT_ERRORS as e:
            artifact_set.skipped.append(f"agent:{module}/{agent_file.name}: {e}")

    for workflow_file in iter_workflow_files(artifacts_root, module):
        try:
            artifact_set.workflows.append(load_workflow_document(workflow_file, artifacts_root, module))
        except DOCUMENT_ERRORS as e:
            rel = to_posix(workflow_file.relative_to(artifacts_root))
            artifact_set.skipped.append(f"workflow:{rel}: {e}")

    return artifact_set


def discover_artifacts(
    artifacts_root: Path, selected_modules: Optional[Iterable[str]] = None
) -> List[ModuleArtifactSet]:
    """Discover all modules in install order (base module first)."""
    return [discover_module(artifacts_root, mod) for mod in module_order(selected_modules)]


def render_frontmatter(data: Dict[str, Any]) -> str:
    """Serialize ``data`` as a ``---`` delimited YAML block (trailing newline included)."""
    yaml_str = yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False, width=1000)
    return f"---\n{yaml_str}---\n"
