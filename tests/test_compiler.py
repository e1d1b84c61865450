import pytest
import yaml

from pr_review.agent.compiler import build_menu_xml, compile_agent, compile_agent_file
from pr_review.agent.template_engine import get_default_values, replace_placeholders
from pr_review.agent.xml_utils import escape_xml, unescape_xml
from pr_review.core.documents import discover_module, split_frontmatter
from pr_review.core.types import MenuItem

SOURCE = """
agent:
  metadata:
    id: "{prr_folder}/prr/agents/security-reviewer.md"
    name: Sam
    title: Security Reviewer
    icon: "🛡️"
    capabilities: "OWASP, secrets"
  persona:
    role: |
      Security
      reviewer
    identity: Finds <injection> & leaks
    principles:
      - Assume input is hostile.
      - Report evidence.
  critical_actions:
    - "Load {project-root}/{prr_folder}/prr/config.yaml"
  memories:
    - Prefers "evidence" over opinion
  menu:
    - trigger: SR or fuzzy match on security-review
      workflow: "{project-root}/{prr_folder}/prr/workflows/3-review/security-review/workflow.yaml"
      description: "[SR] Security review"
    - trigger: XX
      description: "[XX] Nothing to run"
install_config:
  questions:
    - id: prr_folder
      default: _prr
"""


def test_compile_produces_frontmatter_and_xml():
    compiled = compile_agent(SOURCE, agent_name="security-reviewer", module="prr")
    meta, body = split_frontmatter(compiled.markdown)

    assert meta["id"] == "_prr/prr/agents/security-reviewer.md"
    assert meta["name"] == "Sam"
    assert meta["description"] == "Security Reviewer"
    assert meta["capabilities"] == "OWASP, secrets"
    assert "no-launcher" not in meta

    assert "```xml\n<agent " in body
    assert "<role>Security reviewer</role>" in body
    assert "<identity>Finds &lt;injection&gt; &amp; leaks</identity>" in body
    assert "<principles>Assume input is hostile. Report evidence.</principles>" in body
    assert "<action>Load {project-root}/_prr/prr/config.yaml</action>" in body
    assert "<memory>Prefers &quot;evidence&quot; over opinion</memory>" in body
    assert 'workflow="{project-root}/_prr/prr/workflows/3-review/security-review/workflow.yaml"' in body


def test_answers_override_install_defaults():
    compiled = compile_agent(SOURCE, {"prr_folder": "_custom"}, "security-reviewer", "prr")
    assert compiled.document.id == "_custom/prr/agents/security-reviewer.md"
    assert "install_config" not in compiled.processed_yaml


def test_document_fields():
    doc = compile_agent(SOURCE, agent_name="security-reviewer", module="prr").document
    assert doc.source_path == "prr/agents/security-reviewer.md"
    assert doc.stem == "security-reviewer"
    assert doc.module == "prr"
    assert [item.trigger for item in doc.menu_items] == ["SR or fuzzy match on security-review", "XX"]


def test_name_and_description_fallbacks():
    compiled = compile_agent("agent:\n  metadata: {}\n", agent_name="code-helper", module="core")
    assert compiled.document.name == "code helper"
    assert compiled.document.description == "PR Review Agent"
    assert compiled.document.icon == "🔍"


def test_no_launcher_is_carried_to_frontmatter():
    compiled = compile_agent("agent:\n  metadata:\n    name: Hidden\n    no_launcher: true\n", agent_name="hidden")
    meta, _ = split_frontmatter(compiled.markdown)
    assert meta["no-launcher"] is True


def test_invalid_sources_are_rejected():
    with pytest.raises(ValueError):
        compile_agent("just: text\n")
    with pytest.raises(ValueError):
        compile_agent("agent:\n  persona: {}\n")
    with pytest.raises(yaml.YAMLError):
        compile_agent("agent: [unclosed\n")


def test_menu_order_and_empty_item():
    xml = build_menu_xml([MenuItem(trigger="XX", description="[XX] Nothing")], "_prr")
    lines = [line.strip() for line in xml.splitlines()]

    assert lines[1].startswith('<item cmd="MH')
    assert lines[2].startswith('<item cmd="CH')
    assert lines[3] == '<item cmd="XX" exec="">[XX] Nothing</item>'
    assert 'exec="{project-root}/_prr/core/workflows/party-mode/workflow.md"' in lines[4]
    assert lines[5].startswith('<item cmd="DA')


def test_compile_agent_file_writes_sibling_markdown(tmp_path):
    source = tmp_path / "prr" / "agents" / "security-reviewer.agent.yaml"
    source.parent.mkdir(parents=True)
    source.write_text(SOURCE, encoding="utf-8")

    compile_agent_file(source, "prr")

    compiled = tmp_path / "prr" / "agents" / "security-reviewer.md"
    assert compiled.exists()
    # Source YAML is not picked up as an agent document; the compiled file is.
    agent = discover_module(tmp_path, "prr").agents[0]
    assert agent.name == "Sam"
    assert agent.description == "Security Reviewer"
    assert agent.source_path == "prr/agents/security-reviewer.md"


def test_placeholders_keep_unknown_variables():
    data = {"a": "{known}/{unknown}/{project-root}", "b": ["{known}"], "c": 3}
    assert replace_placeholders(data, {"known": "K"}) == {"a": "K/{unknown}/{project-root}", "b": ["K"], "c": 3}


def test_default_values_need_id_and_default():
    config = {"questions": [{"id": "a", "default": 1}, {"id": "b"}, {"default": 2}, "junk"]}
    assert get_default_values(config) == {"a": 1}
    assert get_default_values(None) == {}


def test_xml_escaping():
    assert escape_xml(None) == ""
    assert escape_xml("<a href=\"x\">&'") == "&lt;a href=&quot;x&quot;&gt;&amp;&apos;"
    assert unescape_xml("&amp;lt;") == "&lt;"
    assert unescape_xml(escape_xml("a < b & c")) == "a < b & c"
