"""
Per-directory record of launcher files written by the last setup.

Stored as a JSON array of file names in `<target_dir>/.prr-installed.json`.
Cleanup removes exactly these names, then the record itself.
"""

import json
from pathlib import Path
from typing import List, Optional

from .paths import INSTALLED_MANIFEST_NAME


def manifest_path(target_path: Path) -> Path:
    return target_path / INSTALLED_MANIFEST_NAME


def read_installed(target_path: Path) -> Optional[List[str]]:
    """
    Return recorded file names, or None when there is no usable record.

    A corrupt or non-list record counts as "nothing recorded" so callers fall
    back to the prefix sweep.
    """
    path = manifest_path(target_path)
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        return None
    if not isinstance(data, list):
        return None
    return [name for name in data if isinstance(name, str) and name]


def write_installed(target_path: Path, file_names: List[str]) -> Path:
    """Write the record, de-duplicating names in first-seen order."""
    unique: List[str] = []
    for name in file_names:
        if name not in unique:
            unique.append(name)
    path = manifest_path(target_path)
    path.write_text(json.dumps(unique, indent=2), encoding="utf-8")
    return path


def remove_installed(target_path: Path, file_names: List[str]) -> List[str]:
    """Delete recorded files that are plain files inside ``target_path``."""
    removed: List[str] = []
    root = target_path.resolve()
    for name in file_names:
        candidate = (target_path / name).resolve()
        # Never follow a record outside its own directory.
        if candidate.parent != root:
            continue
        if candidate.is_file():
            candidate.unlink()
            removed.append(name)
    return removed


def clear_record(target_path: Path) -> None:
    path = manifest_path(target_path)
    if path.exists():
        path.unlink()
