"""Installation orchestration: module copy, configs, manifests, IDE setup."""

from .detector import InstallationStatus, detect
from .installer import InstallConfig, Installer, InstallSummary
from .manifest import InstallationManifest, read_manifest, write_manifest

__all__ = [
    "InstallConfig",
    "InstallSummary",
    "InstallationManifest",
    "InstallationStatus",
    "Installer",
    "detect",
    "read_manifest",
    "write_manifest",
]
