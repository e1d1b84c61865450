"""Agent source compilation: `*.agent.yaml` -> launcher-ready Markdown."""

from .compiler import CompiledAgent, compile_agent, compile_agent_file
from .template_engine import (
    extract_install_config,
    get_default_values,
    process_agent_yaml,
    replace_placeholders,
    strip_install_config,
)
from .xml_utils import escape_xml, unescape_xml

__all__ = [
    "CompiledAgent",
    "compile_agent",
    "compile_agent_file",
    "extract_install_config",
    "get_default_values",
    "process_agent_yaml",
    "replace_placeholders",
    "strip_install_config",
    "escape_xml",
    "unescape_xml",
]
