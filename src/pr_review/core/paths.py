"""
Path and naming helpers shared by every adapter.

Pure string transforms, no filesystem access.
"""

from pathlib import PurePosixPath
from typing import Iterable, List, Optional

PRR_FOLDER_NAME = "_prr"
BASE_MODULE = "core"
DEFAULT_MODULES = ["prr"]

# Files and config entries carrying this prefix are owned by the installer.
NAMESPACE_PREFIX = "prr-"

# Side-car written into each config-driven target directory
INSTALLED_MANIFEST_NAME = ".prr-installed.json"


def to_colon_path(p: str) -> str:
    return p.replace("/", ":").replace("\\", ":")


def to_dash_path(p: str) -> str:
    return p.replace("/", "-").replace("\\", "-").replace(".", "-")


def to_posix(p) -> str:
    """Forward-slash form of a relative path, regardless of host separator."""
    return str(p).replace("\\", "/")


def join_posix(*parts: str) -> str:
    return "/".join(to_posix(part).strip("/") for part in parts if part)


def module_order(selected_modules: Optional[Iterable[str]] = None) -> List[str]:
    """
    Base module first, then selected modules, de-duplicated in first-seen order.

    ``None`` means the default selection (``["prr"]``); an explicit empty list
    means "base module only".
    """
    if selected_modules is None:
        selected_modules = DEFAULT_MODULES
    ordered = [BASE_MODULE]
    for mod in selected_modules:
        if mod and mod not in ordered:
            ordered.append(mod)
    return ordered


def leaf_dir_name(relative_file: str, fallback: str = "") -> str:
    """Name of the directory directly containing ``relative_file``."""
    parent = PurePosixPath(to_posix(relative_file)).parent
    return parent.name or fallback


def prefixed(name: str) -> str:
    return f"{NAMESPACE_PREFIX}{name}"


def is_owned_name(name: str, suffix: str = ".md") -> bool:
    """True for file names the prefix sweep is allowed to delete."""
    return name.startswith(NAMESPACE_PREFIX) and name.endswith(suffix)
