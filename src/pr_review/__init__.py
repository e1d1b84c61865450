"""
PR Review Kit - installer for AI-driven code review agents and workflows.

Installs agent/workflow modules into a project's _prr/ folder and generates
launchers for popular IDEs:
- Claude Code (.claude/commands/prr/)
- Cursor (.cursor/commands/)
- Windsurf (.windsurf/workflows/)
- OpenCode (.opencode/)
- GitHub Copilot (.github/)
- Codex (~/.codex/prompts or .codex/prompts)
- KiloCoder (.kilocodemodes)
"""

__version__ = "1.0.0"

__all__ = [
    "adapters",
    "agent",
    "cli",
    "core",
    "installer",
    "utils",
]
