"""
Agent compiler — `<name>.agent.yaml` to `<name>.md`.

The compiled file carries two views of the same agent:
- a YAML frontmatter block (id, name, description, title, icon,
  capabilities, no-launcher) read back by the IDE adapters
- a fenced ```xml agent block (activation, critical actions, persona,
  memories, menu) read by the model at runtime
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from pr_review.core.documents import render_frontmatter
from pr_review.core.paths import PRR_FOLDER_NAME, join_posix
from pr_review.core.types import AgentDocument, MenuItem

from .template_engine import (
    extract_install_config,
    get_default_values,
    process_agent_yaml,
    strip_install_config,
)
from .xml_utils import escape_xml

DEFAULT_ICON = "🔍"
AGENT_SOURCE_SUFFIX = ".agent.yaml"

INTRO = (
    "You must fully embody this agent's persona and follow all activation instructions "
    "exactly as specified. NEVER break character until given an exit command."
)


@dataclass
class CompiledAgent:
    markdown: str
    document: AgentDocument
    processed_yaml: Dict[str, Any]


def _squash(text: Any) -> str:
    return re.sub(r"\s+", " ", str(text).strip())


def _principles_text(principles: Any) -> Optional[str]:
    if not principles:
        return None
    if isinstance(principles, list):
        return " ".join(str(p).strip() for p in principles)
    return re.sub(r"\n+", " ", str(principles).strip())


def _menu_items(menu: Any) -> List[MenuItem]:
    items = []
    for entry in menu or []:
        if not isinstance(entry, dict) or not entry.get("trigger"):
            continue
        items.append(MenuItem(
            trigger=str(entry["trigger"]),
            description=str(entry.get("description") or ""),
            workflow_ref=entry.get("workflow"),
            exec_ref=entry.get("exec"),
            action=entry.get("action"),
        ))
    return items


# ============================================================
# XML sections
# ============================================================

def build_activation_xml(name: str, title: str) -> str:
    return (
        "  <activation>\n"
        f"    <step>Greet the user by name if known, introduce yourself as {escape_xml(name or 'PR Reviewer')} "
        f"({escape_xml(title or 'Code Reviewer')})</step>\n"
        "    <step>Display your menu using numbered list format</step>\n"
        "    <step>Wait for user to select an option</step>\n"
        "    <step>Load and execute the corresponding workflow or task</step>\n"
        "  </activation>\n"
    )


def build_persona_xml(agent: AgentDocument) -> str:
    fields = [
        ("role", agent.role),
        ("identity", agent.identity),
        ("communication_style", agent.communication_style),
        ("principles", agent.principles),
    ]
    if not any(value for _, value in fields):
        return ""
    xml = "  <persona>\n"
    for tag, value in fields:
        if value:
            xml += f"    <{tag}>{escape_xml(value)}</{tag}>\n"
    xml += "  </persona>\n"
    return xml


def build_memories_xml(memories: List[str]) -> str:
    if not memories:
        return ""
    xml = "  <memories>\n"
    for memory in memories:
        xml += f"    <memory>{escape_xml(memory)}</memory>\n"
    xml += "  </memories>\n"
    return xml


def build_menu_xml(items: List[MenuItem], prr_folder_name: str = PRR_FOLDER_NAME) -> str:
    """Menu with built-in help/chat first and party-mode/dismiss last."""
    party_mode = f"{{project-root}}/{prr_folder_name}/core/workflows/party-mode/workflow.md"
    xml = "  <menu>\n"
    xml += '    <item cmd="MH or fuzzy match on menu or help">[MH] Redisplay Menu Help</item>\n'
    xml += '    <item cmd="CH or fuzzy match on chat">[CH] Chat with the Reviewer about anything</item>\n'
    for item in items:
        attrs = [f'cmd="{escape_xml(item.trigger)}"']
        if item.workflow_ref:
            attrs.append(f'workflow="{escape_xml(item.workflow_ref)}"')
        if item.exec_ref:
            attrs.append(f'exec="{escape_xml(item.exec_ref)}"')
        if item.action:
            attrs.append(f'action="{escape_xml(item.action)}"')
        if len(attrs) == 1:
            attrs.append('exec=""')
        xml += f"    <item {' '.join(attrs)}>{escape_xml(item.description)}</item>\n"
    xml += (
        f'    <item cmd="PM or fuzzy match on party-mode" exec="{party_mode}">'
        "[PM] Start Party Mode (multi-reviewer discussion)</item>\n"
    )
    xml += '    <item cmd="DA or fuzzy match on exit, leave, goodbye or dismiss agent">[DA] Dismiss Reviewer</item>\n'
    xml += "  </menu>\n"
    return xml


def build_frontmatter(agent: AgentDocument) -> str:
    data: Dict[str, Any] = {
        "id": agent.id,
        "name": agent.name,
        "description": agent.description,
        "title": agent.title,
        "icon": agent.icon,
    }
    if agent.capabilities:
        data["capabilities"] = agent.capabilities
    if agent.no_launcher:
        data["no-launcher"] = True
    return render_frontmatter(data)


def render_agent(agent: AgentDocument, critical_actions: List[str], prr_folder_name: str = PRR_FOLDER_NAME) -> str:
    attrs = [
        f'id="{escape_xml(agent.id)}"',
        f'name="{escape_xml(agent.name)}"',
        f'title="{escape_xml(agent.title)}"',
        f'icon="{escape_xml(agent.icon)}"',
    ]
    if agent.capabilities:
        attrs.append(f'capabilities="{escape_xml(agent.capabilities)}"')

    out = build_frontmatter(agent) + "\n" + INTRO + "\n\n```xml\n"
    out += f"<agent {' '.join(attrs)}>\n"
    out += build_activation_xml(agent.name, agent.title)
    if critical_actions:
        out += "  <critical_actions>\n"
        for action in critical_actions:
            out += f"    <action>{escape_xml(action)}</action>\n"
        out += "  </critical_actions>\n"
    out += build_persona_xml(agent)
    out += build_memories_xml(agent.memories)
    out += build_menu_xml(agent.menu_items, prr_folder_name)
    out += "</agent>\n```\n"
    return out


# ============================================================
# Entry points
# ============================================================

def compile_agent(
    yaml_content: str,
    answers: Optional[Dict[str, Any]] = None,
    agent_name: str = "",
    module: str = "",
    prr_folder_name: str = PRR_FOLDER_NAME,
) -> CompiledAgent:
    """
    Compile agent source YAML.

    Raises:
        yaml.YAMLError: source is not valid YAML
        ValueError: source has no `agent.metadata` mapping
    """
    source = yaml.safe_load(yaml_content)
    if not isinstance(source, dict) or not isinstance(source.get("agent"), dict):
        raise ValueError("agent source must have a top-level 'agent' mapping")

    final_answers = dict(answers or {})
    install_config = extract_install_config(source)
    if install_config:
        final_answers = {**get_default_values(install_config), **final_answers}

    processed = strip_install_config(process_agent_yaml(source, final_answers))
    agent = processed["agent"]
    meta = agent.get("metadata")
    if not isinstance(meta, dict):
        raise ValueError("agent source is missing 'agent.metadata'")

    persona = agent.get("persona") or {}
    stem = agent_name or str(meta.get("id") or meta.get("name") or "agent")
    name = str(meta.get("name") or stem.replace("-", " "))
    title = str(meta.get("title") or "")

    document = AgentDocument(
        id=str(meta.get("id") or stem),
        name=name,
        title=title,
        icon=str(meta.get("icon") or DEFAULT_ICON),
        capabilities=str(meta["capabilities"]) if meta.get("capabilities") else None,
        role=_squash(persona["role"]) if persona.get("role") else "",
        identity=_squash(persona["identity"]) if persona.get("identity") else "",
        communication_style=_squash(persona["communication_style"]) if persona.get("communication_style") else None,
        principles=_principles_text(persona.get("principles")),
        memories=[str(m) for m in agent.get("memories") or []],
        menu_items=_menu_items(agent.get("menu")),
        no_launcher=bool(meta.get("no_launcher") or meta.get("no-launcher")),
        module=module,
        source_path=join_posix(module, "agents", f"{stem}.md"),
        description=title or "PR Review Agent",
    )
    critical_actions = [str(a) for a in agent.get("critical_actions") or []]
    markdown = render_agent(document, critical_actions, prr_folder_name)
    return CompiledAgent(markdown=markdown, document=document, processed_yaml=processed)


def compile_agent_file(
    source: Path,
    module: str,
    answers: Optional[Dict[str, Any]] = None,
    prr_folder_name: str = PRR_FOLDER_NAME,
) -> CompiledAgent:
    """Compile `<dir>/<stem>.agent.yaml` and write `<dir>/<stem>.md` beside it."""
    stem = source.name[: -len(AGENT_SOURCE_SUFFIX)] if source.name.endswith(AGENT_SOURCE_SUFFIX) else source.stem
    compiled = compile_agent(source.read_text(encoding="utf-8"), answers, stem, module, prr_folder_name)
    source.with_name(f"{stem}.md").write_text(compiled.markdown, encoding="utf-8")
    return compiled
