"""
Adapter registry — bespoke adapters first, then config-driven ones from the
platform catalog (skipping keys a bespoke adapter already claimed).

Dispatch never raises: unknown keys and adapter failures come back as
DispatchResult(success=False).
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Type

import yaml

from .adapter import BaseAdapter
from .paths import PRR_FOLDER_NAME
from .types import AdapterInfo, DispatchResult, SetupOptions

CATALOG_PATH = Path(__file__).parent.parent / "adapters" / "platforms.yaml"


def load_catalog(path: Path = CATALOG_PATH) -> Dict[str, Dict[str, Any]]:
    """
    Read the platform catalog.

    Raises:
        FileNotFoundError: catalog missing (packaging error)
        ValueError: catalog is not a mapping of platform entries
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    platforms = data.get("platforms", {}) if isinstance(data, dict) else None
    if not isinstance(platforms, dict):
        raise ValueError(f"{path.name}: 'platforms' must be a mapping")
    for code, info in platforms.items():
        if not isinstance(info, dict) or not info.get("name"):
            raise ValueError(f"{path.name}: platform '{code}' needs a 'name'")
    return platforms


class AdapterRegistry:
    def __init__(
        self,
        bespoke: Optional[Sequence[Type[BaseAdapter]]] = None,
        catalog_path: Path = CATALOG_PATH,
        prr_folder_name: str = PRR_FOLDER_NAME,
    ):
        self._adapters: Dict[str, BaseAdapter] = {}
        self._bespoke = bespoke
        self._catalog_path = catalog_path
        self._initialized = False
        self.prr_folder_name = prr_folder_name

    # ---- population ----

    def register(self, adapter_class: Type[BaseAdapter]) -> BaseAdapter:
        instance = adapter_class(prr_folder_name=self.prr_folder_name)
        if not instance.key:
            raise ValueError(f"{adapter_class.__name__} has no key")
        self._adapters[instance.key.lower()] = instance
        return instance

    def ensure_initialized(self) -> None:
        if self._initialized:
            return
        self._load_bespoke()
        self._load_config_driven()
        self._initialized = True

    def _load_bespoke(self) -> None:
        bespoke = self._bespoke
        if bespoke is None:
            from pr_review.adapters import BESPOKE_ADAPTERS

            bespoke = BESPOKE_ADAPTERS
        for adapter_class in bespoke:
            self.register(adapter_class)

    def _load_config_driven(self) -> None:
        from pr_review.adapters.config_driven import ConfigDrivenAdapter

        for code, info in load_catalog(self._catalog_path).items():
            key = str(code).lower()
            if not info.get("installer"):
                continue  # informational entry, no automated setup
            if key in self._adapters:
                continue  # bespoke adapter wins
            self._adapters[key] = ConfigDrivenAdapter(key, info, prr_folder_name=self.prr_folder_name)

    def set_prr_folder_name(self, name: str) -> None:
        self.prr_folder_name = name
        for adapter in self._adapters.values():
            adapter.set_prr_folder_name(name)

    # ---- queries ----

    def get(self, key: str) -> Optional[BaseAdapter]:
        self.ensure_initialized()
        return self._adapters.get(key.lower())

    def all(self) -> List[BaseAdapter]:
        self.ensure_initialized()
        return list(self._adapters.values())

    def names(self) -> List[str]:
        return [info.key for info in self.get_available()]

    def get_available(self) -> List[AdapterInfo]:
        """All adapters, preferred first, then by display name."""
        infos = [adapter.info for adapter in self.all()]
        return sorted(infos, key=lambda i: (not i.preferred, i.display_name.lower()))

    def get_preferred(self) -> List[AdapterInfo]:
        return [info for info in self.get_available() if info.preferred]

    def detect_installed(self, project_dir: Path) -> List[str]:
        """Keys of adapters whose target location looks configured."""
        found = []
        for info in self.get_available():
            try:
                if self._adapters[info.key].detect(project_dir):
                    found.append(info.key)
            except (OSError, UnicodeDecodeError):
                continue
        return found

    # ---- dispatch ----

    def setup(
        self, key: str, project_dir: Path, artifacts_dir: Path, options: Optional[SetupOptions] = None
    ) -> DispatchResult:
        adapter = self.get(key)
        if adapter is None:
            return DispatchResult(ide=key, success=False, error="unsupported IDE")
        try:
            result = adapter.setup(project_dir, artifacts_dir, options or SetupOptions())
        except Exception as e:
            return DispatchResult(ide=key, success=False, error=str(e) or e.__class__.__name__)
        return DispatchResult(ide=key, success=True, detail=result.detail, result=result)

    def cleanup(self, key: str, project_dir: Path, options: Optional[SetupOptions] = None) -> DispatchResult:
        adapter = self.get(key)
        if adapter is None:
            return DispatchResult(ide=key, success=False, error="unsupported IDE")
        try:
            adapter.cleanup(project_dir, options or SetupOptions())
        except Exception as e:
            return DispatchResult(ide=key, success=False, error=str(e) or e.__class__.__name__)
        return DispatchResult(ide=key, success=True)

    def cleanup_all(self, project_dir: Path, options: Optional[SetupOptions] = None) -> List[DispatchResult]:
        """Run cleanup for every adapter; one failure does not stop the others."""
        return [self.cleanup(info.key, project_dir, options) for info in self.get_available()]


adapter_registry = AdapterRegistry()
