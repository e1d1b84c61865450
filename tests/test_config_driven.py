import json

import pytest

from pr_review.adapters.config_driven import ConfigDrivenAdapter, load_template, render_template, yaml_scalar
from pr_review.core.documents import split_frontmatter
from pr_review.core.paths import INSTALLED_MANIFEST_NAME
from pr_review.core.types import SetupOptions

from conftest import snapshot_tree, write_agent, write_workflow


def _adapter(installer, **extra):
    return ConfigDrivenAdapter("test-ide", {"name": "Test IDE", "installer": installer, **extra})


def _files(directory):
    return sorted(p.name for p in directory.iterdir() if p.is_file())


def test_end_to_end_single_target(project_dir, artifacts_root):
    adapter = _adapter({"target_dir": ".ide/launchers", "template_type": "default"})

    result = adapter.setup(project_dir, artifacts_root)

    target = project_dir / ".ide" / "launchers"
    assert _files(target) == sorted(["reviewer.md", "prr-select-pr.md", INSTALLED_MANIFEST_NAME])
    recorded = json.loads((target / INSTALLED_MANIFEST_NAME).read_text(encoding="utf-8"))
    assert recorded == ["reviewer.md", "prr-select-pr.md"]
    assert result.agents == 1
    assert result.workflows == 1
    assert result.detail == "1 agents, 1 workflows"


def test_launcher_content_is_rendered(project_dir, artifacts_root):
    _adapter({"target_dir": ".ide"}).setup(project_dir, artifacts_root)

    agent_launcher = (project_dir / ".ide" / "reviewer.md").read_text(encoding="utf-8")
    assert "name: 'Reviewer'" in agent_launcher
    assert "description: 'Reviews pull requests'" in agent_launcher
    assert "{project-root}/_prr/core/agents/reviewer.md" in agent_launcher
    assert "{{" not in agent_launcher

    workflow_launcher = (project_dir / ".ide" / "prr-select-pr.md").read_text(encoding="utf-8")
    assert "description: 'Pick a PR'" in workflow_launcher
    assert "@{project-root}/_prr/prr/workflows/select-pr/workflow.yaml" in workflow_launcher


def test_setup_is_idempotent(project_dir, artifacts_root):
    adapter = _adapter({"target_dir": ".ide"})
    adapter.setup(project_dir, artifacts_root)
    first = snapshot_tree(project_dir / ".ide")
    adapter.setup(project_dir, artifacts_root)
    assert snapshot_tree(project_dir / ".ide") == first


def test_cleanup_removes_exactly_recorded_files(project_dir, artifacts_root):
    adapter = _adapter({"target_dir": ".ide"})
    adapter.setup(project_dir, artifacts_root)
    (project_dir / ".ide" / "notes.md").write_text("mine", encoding="utf-8")

    adapter.cleanup(project_dir)

    assert _files(project_dir / ".ide") == ["notes.md"]


def test_cleanup_on_fresh_project_is_noop(project_dir):
    adapter = _adapter({"target_dir": ".ide"})
    adapter.cleanup(project_dir)
    adapter.cleanup(project_dir)
    assert not (project_dir / ".ide").exists()


def test_cleanup_without_record_sweeps_prefixed_files(project_dir, artifacts_root):
    adapter = _adapter({"target_dir": ".ide"})
    adapter.setup(project_dir, artifacts_root)
    target = project_dir / ".ide"
    (target / INSTALLED_MANIFEST_NAME).unlink()
    (target / "prr-old.md").write_text("stale", encoding="utf-8")
    (target / "user.md").write_text("mine", encoding="utf-8")

    adapter.cleanup(project_dir)

    # Agent launchers carry no prefix, so the sweep leaves them.
    assert _files(target) == ["reviewer.md", "user.md"]


def test_corrupt_record_falls_back_to_sweep(project_dir, artifacts_root):
    adapter = _adapter({"target_dir": ".ide"})
    adapter.setup(project_dir, artifacts_root)
    target = project_dir / ".ide"
    (target / INSTALLED_MANIFEST_NAME).write_text("{not json", encoding="utf-8")

    adapter.cleanup(project_dir)

    assert "prr-select-pr.md" not in _files(target)
    assert INSTALLED_MANIFEST_NAME not in _files(target)


def test_record_never_reaches_outside_target(project_dir, artifacts_root):
    adapter = _adapter({"target_dir": ".ide"})
    adapter.setup(project_dir, artifacts_root)
    outside = project_dir / "keep.md"
    outside.write_text("keep", encoding="utf-8")
    (project_dir / ".ide" / INSTALLED_MANIFEST_NAME).write_text(json.dumps(["../keep.md"]), encoding="utf-8")

    adapter.cleanup(project_dir)

    assert outside.exists()


def test_no_launcher_agents_are_skipped(project_dir, artifacts_root):
    write_agent(artifacts_root, "core", "internal", {"name": "Internal", "no-launcher": True})
    result = _adapter({"target_dir": ".ide"}).setup(project_dir, artifacts_root)
    assert not (project_dir / ".ide" / "internal.md").exists()
    assert result.agents == 1


def test_later_module_overwrites_same_stem(project_dir, artifacts_root):
    write_agent(artifacts_root, "prr", "reviewer", {"name": "PRR Reviewer"})
    _adapter({"target_dir": ".ide"}).setup(project_dir, artifacts_root)
    content = (project_dir / ".ide" / "reviewer.md").read_text(encoding="utf-8")
    assert "prr/agents/reviewer.md" in content


def test_unselected_modules_are_ignored(project_dir, artifacts_root):
    write_workflow(artifacts_root, "extra", "lint", {"name": "lint"})
    adapter = _adapter({"target_dir": ".ide"})

    adapter.setup(project_dir, artifacts_root, SetupOptions(selected_modules=["prr"]))
    assert not (project_dir / ".ide" / "prr-lint.md").exists()

    adapter.setup(project_dir, artifacts_root, SetupOptions(selected_modules=["prr", "extra"]))
    assert (project_dir / ".ide" / "prr-lint.md").exists()


def test_multi_target_splits_artifact_kinds(project_dir, artifacts_root):
    adapter = _adapter({
        "targets": [
            {"target_dir": ".oc/agent", "template_type": "opencode", "artifact_types": ["agents"]},
            {"target_dir": ".oc/command", "template_type": "default", "artifact_types": ["workflows"]},
        ]
    })

    adapter.setup(project_dir, artifacts_root)
    adapter.setup(project_dir, artifacts_root)

    assert _files(project_dir / ".oc" / "agent") == sorted(["reviewer.md", INSTALLED_MANIFEST_NAME])
    assert _files(project_dir / ".oc" / "command") == sorted(["prr-select-pr.md", INSTALLED_MANIFEST_NAME])
    assert "mode: primary" in (project_dir / ".oc" / "agent" / "reviewer.md").read_text(encoding="utf-8")

    adapter.cleanup(project_dir)
    assert _files(project_dir / ".oc" / "agent") == []
    assert _files(project_dir / ".oc" / "command") == []


def test_targets_sharing_a_directory_share_one_record(project_dir, artifacts_root):
    adapter = _adapter({
        "targets": [
            {"target_dir": ".shared", "artifact_types": ["agents"]},
            {"target_dir": ".shared", "artifact_types": ["workflows"]},
        ]
    })

    adapter.setup(project_dir, artifacts_root)

    recorded = json.loads((project_dir / ".shared" / INSTALLED_MANIFEST_NAME).read_text(encoding="utf-8"))
    assert recorded == ["reviewer.md", "prr-select-pr.md"]
    assert _files(project_dir / ".shared") == sorted(recorded + [INSTALLED_MANIFEST_NAME])


def test_unknown_template_type_falls_back_to_default(project_dir, artifacts_root):
    _adapter({"target_dir": ".a", "template_type": "nope"}).setup(project_dir, artifacts_root)
    _adapter({"target_dir": ".b", "template_type": "default"}).setup(project_dir, artifacts_root)
    assert snapshot_tree(project_dir / ".a") == snapshot_tree(project_dir / ".b")


def test_prr_folder_name_is_injected(project_dir, artifacts_root):
    adapter = ConfigDrivenAdapter("x", {"name": "X", "installer": {"target_dir": ".x"}}, prr_folder_name="_custom")
    adapter.setup(project_dir, artifacts_root)
    assert "{project-root}/_custom/core/agents/reviewer.md" in (project_dir / ".x" / "reviewer.md").read_text(
        encoding="utf-8"
    )

    adapter.set_prr_folder_name("_other")
    adapter.setup(project_dir, artifacts_root)
    assert "_other/core" in (project_dir / ".x" / "reviewer.md").read_text(encoding="utf-8")


def test_skipped_documents_become_warnings(project_dir, artifacts_root):
    (artifacts_root / "core" / "agents" / "broken.md").write_text("---\nname: [x\n---\n", encoding="utf-8")
    result = _adapter({"target_dir": ".ide"}).setup(project_dir, artifacts_root)
    assert result.ok
    assert len(result.warnings) == 1
    assert "broken.md" in result.warnings[0]


def test_detect_follows_record(project_dir, artifacts_root):
    adapter = _adapter({"target_dir": ".ide"})
    assert adapter.detect(project_dir) is False
    adapter.setup(project_dir, artifacts_root)
    assert adapter.detect(project_dir) is True


def test_invalid_installer_blocks_are_rejected():
    with pytest.raises(ValueError):
        _adapter({"template_type": "default"})
    with pytest.raises(ValueError):
        _adapter({"targets": [{"target_dir": ".x", "artifact_types": ["skills"]}]})


def test_render_template_replaces_every_placeholder():
    template = load_template("default", "workflow")
    out = render_template(template, "N", "D", "m/workflows/w/workflow.md", "_prr")
    assert "{{" not in out
    assert "_prr/m/workflows/w/workflow.md" in out


def test_quotes_and_newlines_keep_frontmatter_valid(project_dir, artifacts_root):
    write_agent(artifacts_root, "prr", "lead", {"name": "O'Brien", "description": "Owns the\nreview's tone"})
    write_workflow(artifacts_root, "prr", "intent", {"name": "intent", "description": "Check the PR author's intent"})
    adapter = _adapter({"targets": [
        {"target_dir": ".ide", "template_type": "default"},
        {"target_dir": ".wind", "template_type": "windsurf", "artifact_types": ["workflows"]},
    ]})

    adapter.setup(project_dir, artifacts_root)

    meta, _ = split_frontmatter((project_dir / ".ide" / "lead.md").read_text(encoding="utf-8"))
    assert meta == {"name": "O'Brien", "description": "Owns the review's tone"}
    meta, _ = split_frontmatter((project_dir / ".ide" / "prr-intent.md").read_text(encoding="utf-8"))
    assert meta["description"] == "Check the PR author's intent"
    meta, body = split_frontmatter((project_dir / ".wind" / "prr-intent.md").read_text(encoding="utf-8"))
    assert meta["description"] == "Check the PR author's intent"
    assert "# intent" in body


def test_yaml_scalar_is_single_line():
    assert yaml_scalar("it's\nfine") == "'it''s fine'"
    assert yaml_scalar("") == "''"
