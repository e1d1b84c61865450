import yaml

from pr_review.adapters.kilo import MODES_FILE, KiloAdapter


def _modes(project_dir):
    return yaml.safe_load((project_dir / MODES_FILE).read_text(encoding="utf-8"))


def _write_modes(project_dir, data):
    (project_dir / MODES_FILE).write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")


def test_setup_creates_modes_and_workflows(project_dir, artifacts_root):
    result = KiloAdapter().setup(project_dir, artifacts_root)

    modes = _modes(project_dir)["customModes"]
    assert [m["slug"] for m in modes] == ["prr-core-reviewer"]
    assert modes[0]["name"] == "Reviewer"
    assert modes[0]["roleDefinition"] == "Reviews pull requests"
    assert "{project-root}/_prr/core/agents/reviewer.md" in modes[0]["customInstructions"]

    workflow = project_dir / ".kilocode" / "workflows" / "prr-select-pr.md"
    assert "@{project-root}/_prr/prr/workflows/select-pr/workflow.yaml" in workflow.read_text(encoding="utf-8")
    assert result.agents == 1
    assert result.workflows == 1


def test_foreign_modes_and_keys_survive(project_dir, artifacts_root):
    _write_modes(project_dir, {
        "version": 2,
        "customModes": [{"slug": "architect", "name": "Architect"}],
    })
    adapter = KiloAdapter()

    adapter.setup(project_dir, artifacts_root)
    adapter.setup(project_dir, artifacts_root)

    data = _modes(project_dir)
    assert data["version"] == 2
    assert [m["slug"] for m in data["customModes"]] == ["architect", "prr-core-reviewer"]


def test_cleanup_removes_only_owned_entries(project_dir, artifacts_root):
    _write_modes(project_dir, {"customModes": [{"slug": "architect"}]})
    adapter = KiloAdapter()
    adapter.setup(project_dir, artifacts_root)

    adapter.cleanup(project_dir)

    assert _modes(project_dir) == {"customModes": [{"slug": "architect"}]}
    assert list((project_dir / ".kilocode" / "workflows").iterdir()) == []


def test_unparseable_modes_file_is_left_alone_by_cleanup(project_dir):
    broken = "customModes: [unclosed\n"
    (project_dir / MODES_FILE).write_text(broken, encoding="utf-8")

    KiloAdapter().cleanup(project_dir)

    assert (project_dir / MODES_FILE).read_text(encoding="utf-8") == broken


def test_modes_file_without_owned_entries_is_not_rewritten(project_dir):
    original = "# team modes\ncustomModes:\n  - slug: architect\n"
    (project_dir / MODES_FILE).write_text(original, encoding="utf-8")

    KiloAdapter().cleanup(project_dir)

    assert (project_dir / MODES_FILE).read_text(encoding="utf-8") == original


def test_unparseable_modes_file_is_replaced_on_setup(project_dir, artifacts_root):
    (project_dir / MODES_FILE).write_text("customModes: [unclosed\n", encoding="utf-8")

    KiloAdapter().setup(project_dir, artifacts_root)

    assert [m["slug"] for m in _modes(project_dir)["customModes"]] == ["prr-core-reviewer"]


def test_cleanup_on_fresh_project_is_noop(project_dir):
    KiloAdapter().cleanup(project_dir)
    assert list(project_dir.iterdir()) == []


def test_detect(project_dir, artifacts_root):
    adapter = KiloAdapter()
    assert adapter.detect(project_dir) is False
    adapter.setup(project_dir, artifacts_root)
    assert adapter.detect(project_dir) is True
    adapter.cleanup(project_dir)
    assert adapter.detect(project_dir) is False
