"""
Config-driven adapter — one instance per catalog entry with an `installer`
block. Renders launcher templates into one or more target directories and
tracks what it wrote in a per-directory side-car.

Output (per target): <target_dir>/<agent stem>.md, <target_dir>/prr-<leaf>.md,
<target_dir>/.prr-installed.json
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from pr_review.core import artifact_manifest
from pr_review.core.adapter import BaseAdapter
from pr_review.core.paths import PRR_FOLDER_NAME, prefixed
from pr_review.core.types import (
    AdapterTarget,
    AgentDocument,
    InstallResult,
    SetupOptions,
    WorkflowDocument,
)

TEMPLATES_DIR = Path(__file__).parent / "templates"


def load_template(template_type: str, kind: str, templates_dir: Path = TEMPLATES_DIR) -> str:
    """
    Return `<template_type>-<kind>.md`, falling back to `default-<kind>.md`.

    Raises:
        FileNotFoundError: neither template exists
    """
    for name in (f"{template_type}-{kind}.md", f"default-{kind}.md"):
        path = templates_dir / name
        if path.is_file():
            return path.read_text(encoding="utf-8")
    raise FileNotFoundError(f"no launcher template for '{template_type}-{kind}'")


def yaml_scalar(value: str) -> str:
    """Single-line, single-quoted YAML scalar for a frontmatter value."""
    text = " ".join(str(value or "").split())
    dumped = yaml.safe_dump(text, default_style="'", allow_unicode=True, width=1_000_000)
    return dumped.split("\n", 1)[0]


def _fill(text: str, name: str, description: str, rel_path: str, prr_folder_name: str) -> str:
    return (
        text.replace("{{name}}", name)
        .replace("{{description}}", description)
        .replace("{{path}}", rel_path)
        .replace("{{prrFolderName}}", prr_folder_name)
    )


def render_template(template: str, name: str, description: str, rel_path: str, prr_folder_name: str) -> str:
    """
    Fill a launcher template.

    Inside the leading `---` block name and description become quoted YAML
    scalars; the body gets the plain text.
    """
    head, body = "", template
    if template.startswith("---\n"):
        end = template.find("\n---\n", 3)
        if end != -1:
            head, body = template[: end + 5], template[end + 5:]
    head = _fill(head, yaml_scalar(name), yaml_scalar(description), rel_path, prr_folder_name)
    return head + _fill(body, name, description, rel_path, prr_folder_name)


def parse_targets(installer_config: Dict[str, Any]) -> List[AdapterTarget]:
    """Normalize a single-target or `targets:` installer block."""
    if installer_config.get("targets"):
        return [AdapterTarget.from_dict(t) for t in installer_config["targets"]]
    return [AdapterTarget.from_dict(installer_config)]


class ConfigDrivenAdapter(BaseAdapter):
    """Adapter for IDEs whose launchers are plain templated Markdown files."""

    def __init__(
        self,
        key: str,
        platform_config: Dict[str, Any],
        prr_folder_name: str = PRR_FOLDER_NAME,
        templates_dir: Path = TEMPLATES_DIR,
    ):
        super().__init__(prr_folder_name)
        self.key = key
        self.display_name = platform_config.get("name") or key
        self.preferred = bool(platform_config.get("preferred", False))
        self.platform_config = platform_config
        self.targets = parse_targets(platform_config.get("installer") or {})
        self.templates_dir = templates_dir

    def _target_dirs(self) -> List[str]:
        unique: List[str] = []
        for target in self.targets:
            if target.target_dir not in unique:
                unique.append(target.target_dir)
        return unique

    def setup(self, project_dir: Path, artifacts_dir: Path, options: Optional[SetupOptions] = None) -> InstallResult:
        options = options or SetupOptions()
        result = InstallResult()

        # Clean every target before writing any, so siblings never undo each other.
        self.cleanup(project_dir, options)

        artifact_sets = self._collect(artifacts_dir, options, result)
        written: Dict[str, List[str]] = {}

        for target in self.targets:
            target_path = project_dir / target.target_dir
            target_path.mkdir(parents=True, exist_ok=True)
            names = written.setdefault(target.target_dir, [])

            if target.wants_agents:
                for artifact_set in artifact_sets:
                    for agent in artifact_set.agents:
                        if agent.no_launcher:
                            continue
                        names.append(self._write_agent(target_path, target, agent))
                        result.agents += 1

            if target.wants_workflows:
                for artifact_set in artifact_sets:
                    for workflow in artifact_set.workflows:
                        names.append(self._write_workflow(target_path, target, workflow))
                        result.workflows += 1

        for target_dir, names in written.items():
            artifact_manifest.write_installed(project_dir / target_dir, names)
            result.files.extend(f"{target_dir}/{name}" for name in names)

        return result

    def _write_agent(self, target_path: Path, target: AdapterTarget, agent: AgentDocument) -> str:
        template = load_template(target.template_type, "agent", self.templates_dir)
        content = render_template(template, agent.name, agent.description, agent.source_path, self.prr_folder_name)
        file_name = f"{agent.stem}.md"
        self._write(target_path / file_name, content)
        return file_name

    def _write_workflow(self, target_path: Path, target: AdapterTarget, workflow: WorkflowDocument) -> str:
        template = load_template(target.template_type, "workflow", self.templates_dir)
        content = render_template(
            template, workflow.name, workflow.description, workflow.source_path, self.prr_folder_name
        )
        file_name = f"{prefixed(workflow.leaf_dir)}.md"
        self._write(target_path / file_name, content)
        return file_name

    def cleanup(self, project_dir: Path, options: Optional[SetupOptions] = None) -> None:
        for target_dir in self._target_dirs():
            target_path = project_dir / target_dir
            if not target_path.is_dir():
                continue
            recorded = artifact_manifest.read_installed(target_path)
            if recorded is None:
                self._sweep_prefixed(target_path)
            else:
                artifact_manifest.remove_installed(target_path, recorded)
            artifact_manifest.clear_record(target_path)

    def detect(self, project_dir: Path) -> bool:
        return any(artifact_manifest.manifest_path(project_dir / d).is_file() for d in self._target_dirs())

    @property
    def info(self):
        info = super().info
        info.checkbox_label = f"{self.display_name} ({self.targets[0].target_dir}/)"
        return info
