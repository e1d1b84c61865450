"""
Codex adapter — writes prompt files for the Codex CLI.

Output: ~/.codex/prompts/prr-<module>-<name>.md (global, default)
or <project>/.codex/prompts/prr-<module>-<name>.md (project)
"""

from pathlib import Path
from typing import Optional

from pr_review.core.adapter import BaseAdapter
from pr_review.core.documents import render_frontmatter
from pr_review.core.paths import join_posix, prefixed
from pr_review.core.types import AgentDocument, InstallResult, SetupOptions, WorkflowDocument

INSTALL_LOCATIONS = ("global", "project")

AGENT_ACTIVATION = """You must fully embody this agent's persona and follow all activation instructions exactly as specified. NEVER break character until given an exit command.

<agent-activation CRITICAL="TRUE">
1. LOAD the FULL agent file from {{project-root}}/{path}
2. READ its entire contents - this contains the complete agent persona, menu, and instructions
3. FOLLOW every step in the <activation> section precisely
4. DISPLAY the welcome/greeting as instructed
5. PRESENT the numbered menu
6. WAIT for user input before proceeding
</agent-activation>
"""

WORKFLOW_COMMAND = (
    "IT IS CRITICAL THAT YOU FOLLOW THIS COMMAND: LOAD the FULL @{{project-root}}/{path}, "
    "READ its entire contents and follow its directions exactly!\n"
)


def prompt_dir(project_dir: Optional[Path], location: str) -> Path:
    if location == "project" and project_dir:
        return project_dir / ".codex" / "prompts"
    return Path.home() / ".codex" / "prompts"


class CodexAdapter(BaseAdapter):
    key = "codex"
    display_name = "Codex"

    def setup(self, project_dir: Path, artifacts_dir: Path, options: Optional[SetupOptions] = None) -> InstallResult:
        options = options or SetupOptions()
        if options.install_location not in INSTALL_LOCATIONS:
            raise ValueError(f"unknown install location: {options.install_location}")

        result = InstallResult()
        dest = prompt_dir(project_dir, options.install_location)
        dest.mkdir(parents=True, exist_ok=True)
        self._sweep_prefixed(dest)

        for artifact_set in self._collect(artifacts_dir, options, result):
            for agent in artifact_set.agents:
                if agent.no_launcher:
                    continue
                file_name = prefixed(f"{agent.module}-{agent.stem}.md")
                self._write(dest / file_name, self.render_agent(agent))
                result.files.append(str(dest / file_name))
                result.agents += 1

            for workflow in artifact_set.workflows:
                file_name = prefixed(f"{workflow.module}-{workflow.leaf_dir}.md")
                self._write(dest / file_name, self.render_workflow(workflow))
                result.files.append(str(dest / file_name))
                result.workflows += 1

        return result

    def render_agent(self, agent: AgentDocument) -> str:
        rel_path = join_posix(self.prr_folder_name, agent.source_path)
        frontmatter = render_frontmatter({
            "name": agent.name,
            "description": f"{agent.name} agent",
            "disable-model-invocation": True,
        })
        return f"{frontmatter}\n{AGENT_ACTIVATION.format(path=rel_path)}"

    def render_workflow(self, workflow: WorkflowDocument) -> str:
        rel_path = join_posix(self.prr_folder_name, workflow.source_path)
        frontmatter = render_frontmatter({
            "name": prefixed(workflow.leaf_dir),
            "description": workflow.description or workflow.name,
            "disable-model-invocation": True,
        })
        return f"{frontmatter}\n{WORKFLOW_COMMAND.format(path=rel_path)}"

    def cleanup(self, project_dir: Path, options: Optional[SetupOptions] = None) -> None:
        # Either location may hold launchers from an earlier install.
        for location in INSTALL_LOCATIONS:
            self._sweep_prefixed(prompt_dir(project_dir, location))

    def detect(self, project_dir: Path) -> bool:
        for location in INSTALL_LOCATIONS:
            directory = prompt_dir(project_dir, location)
            if directory.is_dir() and any(directory.glob("prr-*.md")):
                return True
        return False
