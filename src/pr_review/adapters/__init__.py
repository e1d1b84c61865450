"""IDE adapters. Bespoke ones are listed here; the rest come from platforms.yaml."""

from .codex import CodexAdapter
from .config_driven import ConfigDrivenAdapter
from .copilot import CopilotAdapter
from .kilo import KiloAdapter

BESPOKE_ADAPTERS = [CopilotAdapter, CodexAdapter, KiloAdapter]

__all__ = [
    "BESPOKE_ADAPTERS",
    "CodexAdapter",
    "ConfigDrivenAdapter",
    "CopilotAdapter",
    "KiloAdapter",
]
