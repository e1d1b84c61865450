"""Installation manifest: `<prr>/_config/manifest.yaml`."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from pr_review import __version__

MODULE_SOURCE = "built-in"


def manifest_file(prr_dir: Path) -> Path:
    return prr_dir / "_config" / "manifest.yaml"


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class InstallationManifest:
    version: str = __version__
    install_date: str = ""
    last_updated: str = ""
    modules: List[str] = field(default_factory=list)
    ides: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "installation": {
                "version": self.version,
                "installDate": self.install_date,
                "lastUpdated": self.last_updated,
            },
            "modules": [
                {
                    "name": name,
                    "version": self.version,
                    "installDate": self.install_date,
                    "lastUpdated": self.last_updated,
                    "source": MODULE_SOURCE,
                }
                for name in self.modules
            ],
            "ides": list(self.ides),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InstallationManifest":
        installation = data.get("installation") or {}
        modules = [m if isinstance(m, str) else m.get("name") for m in data.get("modules") or []]
        return cls(
            version=str(installation.get("version") or "unknown"),
            install_date=str(installation.get("installDate") or ""),
            last_updated=str(installation.get("lastUpdated") or ""),
            modules=[m for m in modules if m],
            ides=[str(i) for i in data.get("ides") or []],
        )


def read_manifest(prr_dir: Path) -> Optional[InstallationManifest]:
    """Parsed manifest, or None when missing or unreadable."""
    path = manifest_file(prr_dir)
    if not path.is_file():
        return None
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    return InstallationManifest.from_dict(data)


def write_manifest(
    prr_dir: Path,
    modules: List[str],
    ides: List[str],
    version: str = __version__,
) -> InstallationManifest:
    """Rewrite the manifest; installDate of an existing installation is kept."""
    now = _now()
    existing = read_manifest(prr_dir)
    manifest = InstallationManifest(
        version=version,
        install_date=(existing.install_date if existing and existing.install_date else now),
        last_updated=now,
        modules=list(modules),
        ides=list(ides),
    )
    path = manifest_file(prr_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.dump(manifest.to_dict(), default_flow_style=False, allow_unicode=True, sort_keys=False, width=1000),
        encoding="utf-8",
    )
    return manifest
