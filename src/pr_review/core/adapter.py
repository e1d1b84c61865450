"""
Adapter base class.
Adding a new IDE = add a catalog entry, or implement BaseAdapter + list it in
pr_review.adapters.BESPOKE_ADAPTERS.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from .documents import discover_artifacts
from .paths import PRR_FOLDER_NAME, is_owned_name
from .types import AdapterInfo, InstallResult, ModuleArtifactSet, SetupOptions
from ..utils import Colors


class BaseAdapter(ABC):
    key: str = ""
    display_name: str = ""
    preferred: bool = False

    def __init__(self, prr_folder_name: str = PRR_FOLDER_NAME):
        self.prr_folder_name = prr_folder_name

    def set_prr_folder_name(self, name: str) -> None:
        self.prr_folder_name = name

    @abstractmethod
    def setup(self, project_dir: Path, artifacts_dir: Path, options: Optional[SetupOptions] = None) -> InstallResult: ...

    def cleanup(self, project_dir: Path, options: Optional[SetupOptions] = None) -> None:
        """Remove everything this adapter installed. Default: nothing to remove."""

    def detect(self, project_dir: Path) -> bool:
        return False

    @property
    def info(self) -> AdapterInfo:
        return AdapterInfo(
            key=self.key,
            display_name=self.display_name or self.key,
            preferred=self.preferred,
            checkbox_label=self.display_name or self.key,
        )

    # ---- helpers shared by implementations ----

    def _collect(self, artifacts_dir: Path, options: SetupOptions, result: InstallResult) -> List[ModuleArtifactSet]:
        """Discover artifacts for the selected modules, recording skipped documents."""
        artifact_sets = discover_artifacts(artifacts_dir, options.selected_modules)
        for artifact_set in artifact_sets:
            for skipped in artifact_set.skipped:
                self._skip(result, options, skipped)
        return artifact_sets

    def _skip(self, result: InstallResult, options: SetupOptions, message: str) -> None:
        result.warnings.append(message)
        if options.verbose:
            print(f"  {Colors.YELLOW}Skipped {message}{Colors.ENDC}")

    @staticmethod
    def _sweep_prefixed(directory: Path, suffix: str = ".md") -> List[str]:
        """Delete `prr-*<suffix>` files in ``directory`` (non-recursive)."""
        removed: List[str] = []
        if not directory.is_dir():
            return removed
        for entry in sorted(directory.iterdir()):
            if entry.is_file() and is_owned_name(entry.name, suffix):
                entry.unlink()
                removed.append(entry.name)
        return removed

    @staticmethod
    def _write(path: Path, content: str) -> None:
        path.write_text(content, encoding="utf-8")
