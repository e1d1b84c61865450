"""Detects an existing installation in a project directory."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from pr_review.core.paths import PRR_FOLDER_NAME

from .manifest import read_manifest


@dataclass
class InstallationStatus:
    installed: bool
    prr_dir: Path
    version: str = ""
    install_date: str = ""
    last_updated: str = ""
    modules: List[str] = field(default_factory=list)
    ides: List[str] = field(default_factory=list)


def detect(project_dir: Path, prr_folder_name: str = PRR_FOLDER_NAME) -> InstallationStatus:
    prr_dir = project_dir / prr_folder_name
    manifest = read_manifest(prr_dir) if prr_dir.is_dir() else None
    if manifest is None:
        return InstallationStatus(installed=False, prr_dir=prr_dir)
    return InstallationStatus(
        installed=True,
        prr_dir=prr_dir,
        version=manifest.version,
        install_date=manifest.install_date,
        last_updated=manifest.last_updated,
        modules=manifest.modules,
        ides=manifest.ides,
    )
