"""
GitHub Copilot adapter — agents, prompts and a managed region in
copilot-instructions.md.

Output: .github/agents/prr-<stem>.agent.md, .github/prompts/prr-<leaf>.prompt.md,
.github/copilot-instructions.md (between PRR:START / PRR:END markers)
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from pr_review.core.adapter import BaseAdapter
from pr_review.core.documents import render_frontmatter
from pr_review.core.paths import join_posix, prefixed
from pr_review.core.types import AgentDocument, InstallResult, SetupOptions, WorkflowDocument

MARKER_START = "<!-- PRR:START -->"
MARKER_END = "<!-- PRR:END -->"

COPILOT_TOOLS = ["read", "edit", "search", "execute"]

INSTRUCTIONS_FILE = "copilot-instructions.md"
BACKUP_SUFFIX = ".bak"

AGENT_ACTIVATION = """You must fully embody this agent's persona and follow all activation instructions exactly as specified.

<agent-activation CRITICAL="TRUE">
1. LOAD the FULL agent file from {{project-root}}/{path}
2. READ its entire contents - this contains the complete agent persona, menu, and instructions
3. FOLLOW every step in the <activation> section precisely
4. DISPLAY the welcome/greeting as instructed
5. PRESENT the numbered menu
6. WAIT for user input before proceeding
</agent-activation>
"""


# ============================================================
# Marker region helpers
# ============================================================

def find_region(content: str) -> Optional[tuple]:
    """(start, end) offsets of the marked region including markers, or None if absent/malformed."""
    start = content.find(MARKER_START)
    end = content.find(MARKER_END)
    if start == -1 or end == -1 or end <= start:
        return None
    return start, end + len(MARKER_END)


def wrap_region(section: str) -> str:
    return f"{MARKER_START}\n{section}\n{MARKER_END}"


def merge_region(existing: str, section: str) -> Optional[str]:
    """Replace the marked region of ``existing``; None when markers are not usable."""
    region = find_region(existing)
    if region is None:
        return None
    start, end = region
    return existing[:start] + wrap_region(section) + existing[end:]


def strip_region(content: str) -> Optional[str]:
    """Remove the marked region; None when there is nothing to strip."""
    region = find_region(content)
    if region is None:
        return None
    start, end = region
    return content[:start] + content[end:]


class CopilotAdapter(BaseAdapter):
    key = "github-copilot"
    display_name = "GitHub Copilot"

    def _github(self, project_dir: Path) -> Path:
        return project_dir / ".github"

    def setup(self, project_dir: Path, artifacts_dir: Path, options: Optional[SetupOptions] = None) -> InstallResult:
        options = options or SetupOptions()
        result = InstallResult()

        agents_dir = self._github(project_dir) / "agents"
        prompts_dir = self._github(project_dir) / "prompts"
        agents_dir.mkdir(parents=True, exist_ok=True)
        prompts_dir.mkdir(parents=True, exist_ok=True)

        self.cleanup(project_dir, SetupOptions(selected_modules=options.selected_modules))

        agents: List[AgentDocument] = []
        for artifact_set in self._collect(artifacts_dir, options, result):
            for agent in artifact_set.agents:
                if agent.no_launcher:
                    continue
                file_name = prefixed(f"{agent.stem}.agent.md")
                self._write(agents_dir / file_name, self.render_agent(agent))
                result.files.append(f".github/agents/{file_name}")
                result.agents += 1
                agents.append(agent)

            for workflow in artifact_set.workflows:
                file_name = prefixed(f"{workflow.leaf_dir}.prompt.md")
                self._write(prompts_dir / file_name, self.render_prompt(workflow))
                result.files.append(f".github/prompts/{file_name}")
                result.workflows += 1

        self.write_instructions(project_dir, self.render_instructions(artifacts_dir, agents))
        result.files.append(f".github/{INSTRUCTIONS_FILE}")
        return result

    # ---- content ----

    def render_agent(self, agent: AgentDocument) -> str:
        rel_path = join_posix(self.prr_folder_name, agent.source_path)
        frontmatter = render_frontmatter({
            "description": agent.description,
            "tools": COPILOT_TOOLS,
            "disable-model-invocation": True,
        })
        return f"{frontmatter}\n{AGENT_ACTIVATION.format(path=rel_path)}"

    def render_prompt(self, workflow: WorkflowDocument) -> str:
        prr = self.prr_folder_name
        wf_path = join_posix(prr, workflow.source_path)
        if workflow.is_structured:
            steps = [
                f"1. Load {{project-root}}/{prr}/prr/config.yaml and store ALL fields as session variables",
                f"2. Load the workflow engine at {{project-root}}/{prr}/core/tasks/workflow.xml",
                f"3. Load and execute the workflow at {{project-root}}/{wf_path} using the engine from step 2",
            ]
        else:
            steps = [
                f"1. Load {{project-root}}/{prr}/prr/config.yaml and store ALL fields as session variables",
                f"2. Load and follow the workflow at {{project-root}}/{wf_path}",
            ]
        frontmatter = render_frontmatter({
            "description": workflow.description or workflow.name,
            "agent": "agent",
            "tools": COPILOT_TOOLS,
        })
        return frontmatter + "\n" + "\n".join(steps) + "\n"

    def _read_module_config(self, artifacts_dir: Path) -> Dict[str, Any]:
        config_path = artifacts_dir / "prr" / "config.yaml"
        if not config_path.is_file():
            return {}
        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError, UnicodeDecodeError):
            return {}
        return data if isinstance(data, dict) else {}

    def render_instructions(self, artifacts_dir: Path, agents: List[AgentDocument]) -> str:
        config = self._read_module_config(artifacts_dir)
        prr = self.prr_folder_name

        lines = [
            "# PR Review Kit — Project Instructions",
            "",
            "## Project Configuration",
            "",
            f"- **User**: {config.get('user_name') or 'Dev'}",
            f"- **Communication Language**: {config.get('communication_language') or 'English'}",
            f"- **Target Repo**: {config.get('target_repo') or '.'}",
            f"- **Output Folder**: {config.get('output_folder') or '_prr-output'}",
            f"- **Review Output**: {config.get('review_output') or '_prr-output/reviews'}",
            "",
            "## PRR Runtime Structure",
            "",
            f"- **Agent definitions**: `{prr}/core/agents/` and `{prr}/prr/agents/`",
            f"- **Workflow definitions**: `{prr}/prr/workflows/` (organized by phase)",
            f"- **Core tasks**: `{prr}/core/tasks/`",
            f"- **Module configuration**: `{prr}/prr/config.yaml`",
            "",
            "## Key Conventions",
            "",
            f"- Always load `{prr}/prr/config.yaml` before any agent activation or workflow execution",
            "- MD-based workflows execute directly — load and follow the `.md` file",
            "- YAML-based workflows require the workflow engine — load `core/tasks/workflow.xml` first",
            "- The `{project-root}` variable resolves to the workspace root at runtime",
            "",
            "## Available Agents",
            "",
            "| Agent | Slash Command | Speciality |",
            "|-------|--------------|------------|",
        ]
        for agent in agents:
            lines.append(f"| {agent.name} | `/{prefixed(agent.stem)}` | {agent.title or agent.description} |")
        lines += [
            "",
            "## Slash Commands",
            "",
            "Use `#prr-` in Copilot Chat to access PR Review prompts, or select agents from the agents dropdown.",
        ]
        return "\n".join(lines)

    # ---- instructions file ----

    def write_instructions(self, project_dir: Path, section: str) -> Path:
        path = self._github(project_dir) / INSTRUCTIONS_FILE
        if path.exists():
            merged = merge_region(path.read_text(encoding="utf-8"), section)
            if merged is not None:
                self._write(path, merged)
                return path
            # No usable markers: keep the user's file aside, byte for byte.
            path.replace(self._free_backup_path(path))
        self._write(path, wrap_region(section) + "\n")
        return path

    @staticmethod
    def _free_backup_path(path: Path) -> Path:
        """`.bak`, or `.bak.<n>` when earlier backups exist; the first backup is never overwritten."""
        backup = path.with_name(INSTRUCTIONS_FILE + BACKUP_SUFFIX)
        n = 1
        while backup.exists():
            backup = path.with_name(f"{INSTRUCTIONS_FILE}{BACKUP_SUFFIX}.{n}")
            n += 1
        return backup

    def restore_instructions(self, project_dir: Path) -> None:
        path = self._github(project_dir) / INSTRUCTIONS_FILE
        if not path.is_file():
            return
        remaining = strip_region(path.read_text(encoding="utf-8"))
        if remaining is None:
            return
        if remaining.strip():
            self._write(path, remaining)
            return
        path.unlink()
        backup = path.with_name(INSTRUCTIONS_FILE + BACKUP_SUFFIX)
        if backup.is_file():
            backup.replace(path)

    # ---- cleanup / detect ----

    def cleanup(self, project_dir: Path, options: Optional[SetupOptions] = None) -> None:
        options = options or SetupOptions()
        github = self._github(project_dir)
        self._sweep_prefixed(github / "agents", ".agent.md")
        self._sweep_prefixed(github / "prompts", ".prompt.md")
        if options.is_uninstall:
            self.restore_instructions(project_dir)

    def detect(self, project_dir: Path) -> bool:
        path = self._github(project_dir) / INSTRUCTIONS_FILE
        if path.is_file() and find_region(path.read_text(encoding="utf-8")) is not None:
            return True
        agents_dir = self._github(project_dir) / "agents"
        return agents_dir.is_dir() and any(agents_dir.glob("prr-*.agent.md"))
