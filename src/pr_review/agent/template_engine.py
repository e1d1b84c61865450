"""
Variable substitution for agent source YAML.

`{var}` placeholders are replaced recursively through strings, lists and
mappings. Unknown variables are left untouched so runtime placeholders such
as `{project-root}` survive compilation.
"""

import re
from typing import Any, Dict, Optional

_RE_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def replace_placeholders(value: Any, variables: Dict[str, Any]) -> Any:
    if isinstance(value, str):
        def _sub(match: "re.Match") -> str:
            key = match.group(1)
            return str(variables[key]) if key in variables else match.group(0)
        return _RE_PLACEHOLDER.sub(_sub, value)
    if isinstance(value, list):
        return [replace_placeholders(item, variables) for item in value]
    if isinstance(value, dict):
        return {k: replace_placeholders(v, variables) for k, v in value.items()}
    return value


def extract_install_config(agent_yaml: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return agent_yaml.get("install_config") or None


def strip_install_config(agent_yaml: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in agent_yaml.items() if k != "install_config"}


def get_default_values(install_config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Answers taken from `default:` of each install question."""
    defaults: Dict[str, Any] = {}
    if not install_config:
        return defaults
    for question in install_config.get("questions") or []:
        if isinstance(question, dict) and question.get("id") and "default" in question:
            defaults[question["id"]] = question["default"]
    return defaults


def process_agent_yaml(agent_yaml: Dict[str, Any], answers: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return replace_placeholders(agent_yaml, answers or {})
