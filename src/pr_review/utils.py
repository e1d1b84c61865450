import getpass
import os
from pathlib import Path
from typing import List, Optional


# ANSI colors
class Colors:
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    ENDC = '\033[0m'


def parse_list(value: Optional[str]) -> List[str]:
    """Split a comma-separated CLI value into trimmed, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def resolve_directory(directory: Optional[str] = None) -> Path:
    """Resolve --directory (default: current working directory) to an absolute path."""
    if directory:
        return Path(directory).expanduser().resolve()
    return Path.cwd()


def get_system_username() -> str:
    """Best-effort login name, used as the default for 'What should reviewers call you?'."""
    try:
        name = getpass.getuser()
    except (KeyError, OSError):
        name = os.environ.get("USER") or os.environ.get("USERNAME") or ""
    return name or "Reviewer"
