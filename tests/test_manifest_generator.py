import csv

from pr_review.installer.manifest import read_manifest, write_manifest
from pr_review.installer.manifest_generator import clean_for_csv, generate_manifests

from conftest import write_agent


def _rows(path):
    with path.open(encoding="utf-8", newline="") as f:
        return list(csv.reader(f))


def test_manifests_list_discovered_artifacts(artifacts_root):
    tasks = artifacts_root / "core" / "tasks"
    tasks.mkdir(parents=True)
    (tasks / "workflow.xml").write_text("<task/>", encoding="utf-8")
    (tasks / "help.md").write_text("# help", encoding="utf-8")
    (tasks / "notes.txt").write_text("ignored", encoding="utf-8")

    counts = generate_manifests(artifacts_root, ["prr"])

    assert counts == {"workflows": 1, "agents": 1, "tasks": 2}
    cfg = artifacts_root / "_config"
    assert _rows(cfg / "workflow-manifest.csv") == [
        ["module", "name", "description", "path"],
        ["prr", "Select PR", "Pick a PR", "_prr/prr/workflows/select-pr/workflow.yaml"],
    ]
    assert _rows(cfg / "agent-manifest.csv")[1] == [
        "core", "Reviewer", "Reviews pull requests", "🔍", "", "_prr/core/agents/reviewer.md",
    ]
    assert [row[1] for row in _rows(cfg / "task-manifest.csv")[1:]] == ["help", "workflow"]


def test_every_field_is_quoted(artifacts_root):
    generate_manifests(artifacts_root, ["prr"])
    text = (artifacts_root / "_config" / "workflow-manifest.csv").read_text(encoding="utf-8")
    assert text.splitlines()[0] == '"module","name","description","path"'


def test_multiline_values_are_flattened(artifacts_root):
    write_agent(artifacts_root, "prr", "wordy", {"name": "Wordy", "capabilities": "one,\n  two\n"})
    generate_manifests(artifacts_root, ["prr"])
    rows = _rows(artifacts_root / "_config" / "agent-manifest.csv")
    assert rows[-1][4] == "one, two"


def test_custom_folder_name_prefixes_paths(artifacts_root):
    generate_manifests(artifacts_root, ["prr"], "_custom")
    rows = _rows(artifacts_root / "_config" / "workflow-manifest.csv")
    assert rows[1][3] == "_custom/prr/workflows/select-pr/workflow.yaml"


def test_clean_for_csv():
    assert clean_for_csv(None) == ""
    assert clean_for_csv("  a\n\tb  ") == "a b"


def test_install_manifest_keeps_install_date(tmp_path):
    first = write_manifest(tmp_path, ["core", "prr"], ["cursor"], "1.0.0")
    second = write_manifest(tmp_path, ["core"], [], "1.1.0")

    assert second.install_date == first.install_date
    loaded = read_manifest(tmp_path)
    assert loaded.version == "1.1.0"
    assert loaded.modules == ["core"]
    assert loaded.ides == []


def test_unreadable_install_manifest(tmp_path):
    path = tmp_path / "_config" / "manifest.yaml"
    path.parent.mkdir()
    path.write_text("installation: [unclosed\n", encoding="utf-8")
    assert read_manifest(tmp_path) is None
