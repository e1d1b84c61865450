"""Core abstractions for PR Review Kit."""

from .types import (
    AdapterInfo,
    AdapterTarget,
    AgentDocument,
    DispatchResult,
    InstallResult,
    MenuItem,
    ModuleArtifactSet,
    SetupOptions,
    WorkflowDocument,
)
from .adapter import BaseAdapter
from .registry import AdapterRegistry, adapter_registry

__all__ = [
    "AdapterInfo",
    "AdapterTarget",
    "AgentDocument",
    "DispatchResult",
    "InstallResult",
    "MenuItem",
    "ModuleArtifactSet",
    "SetupOptions",
    "WorkflowDocument",
    "BaseAdapter",
    "AdapterRegistry",
    "adapter_registry",
]
