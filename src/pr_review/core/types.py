"""Shared types and data structures for PR Review Kit."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

ARTIFACT_AGENTS = "agents"
ARTIFACT_WORKFLOWS = "workflows"
ARTIFACT_TYPES = (ARTIFACT_AGENTS, ARTIFACT_WORKFLOWS)


@dataclass(frozen=True)
class MenuItem:
    """One entry of an agent's command menu."""
    trigger: str
    description: str = ""
    workflow_ref: Optional[str] = None
    exec_ref: Optional[str] = None
    action: Optional[str] = None


@dataclass(frozen=True)
class AgentDocument:
    """
    A compiled persona definition.

    Built by the agent compiler from source YAML, or re-loaded from the
    structured frontmatter of a compiled agent file. `source_path` is relative
    to the artifacts root and always uses forward slashes.
    """
    id: str
    name: str
    title: str = ""
    icon: str = ""
    capabilities: Optional[str] = None
    role: str = ""
    identity: str = ""
    communication_style: Optional[str] = None
    principles: Optional[str] = None
    memories: List[str] = field(default_factory=list)
    menu_items: List[MenuItem] = field(default_factory=list)
    no_launcher: bool = False
    module: str = ""
    source_path: str = ""
    description: str = ""

    @property
    def stem(self) -> str:
        """Agent file base name without extension (launcher identity)."""
        return Path(self.source_path).stem


@dataclass(frozen=True)
class WorkflowDocument:
    """A workflow discovered under <module>/workflows/**/workflow.{md,yaml}."""
    name: str
    description: str
    source_path: str
    is_structured: bool
    module: str = ""
    leaf_dir: str = ""


@dataclass
class ModuleArtifactSet:
    """Agents and workflows discovered for one module."""
    module: str
    agents: List[AgentDocument] = field(default_factory=list)
    workflows: List[WorkflowDocument] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AdapterTarget:
    """One physical destination of a config-driven IDE."""
    target_dir: str
    template_type: str = "default"
    artifact_types: tuple = ARTIFACT_TYPES

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdapterTarget":
        if not data.get("target_dir"):
            raise ValueError("installer target is missing 'target_dir'")
        artifact_types = data.get("artifact_types") or ARTIFACT_TYPES
        unknown = [t for t in artifact_types if t not in ARTIFACT_TYPES]
        if unknown:
            raise ValueError(f"unknown artifact_types: {', '.join(unknown)}")
        return cls(
            target_dir=data["target_dir"],
            template_type=data.get("template_type") or "default",
            artifact_types=tuple(artifact_types),
        )

    @property
    def wants_agents(self) -> bool:
        return ARTIFACT_AGENTS in self.artifact_types

    @property
    def wants_workflows(self) -> bool:
        return ARTIFACT_WORKFLOWS in self.artifact_types


@dataclass
class SetupOptions:
    """Options passed through the registry to every adapter."""
    selected_modules: List[str] = field(default_factory=lambda: ["prr"])
    install_location: str = "global"  # "global" | "project" (Codex only)
    is_uninstall: bool = False
    verbose: bool = False


@dataclass
class InstallResult:
    agents: int = 0
    workflows: int = 0
    files: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0

    @property
    def detail(self) -> str:
        parts = []
        if self.agents > 0:
            parts.append(f"{self.agents} agents")
        if self.workflows > 0:
            parts.append(f"{self.workflows} workflows")
        return ", ".join(parts)


@dataclass
class DispatchResult:
    """Outcome of a registry dispatch; never carries an exception."""
    ide: str
    success: bool
    detail: str = ""
    error: str = ""
    result: Optional[InstallResult] = None


@dataclass
class AdapterInfo:
    """Metadata about one IDE adapter, for prompts and `pr-review list`."""
    key: str
    display_name: str
    preferred: bool = False
    checkbox_label: str = ""
