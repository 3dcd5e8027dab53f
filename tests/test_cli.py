"""Test the command line interface."""

import json

import pytest
from typer.testing import CliRunner

from flowcompare.cli import app, load_definition
from flowcompare.history.exceptions import DefinitionLoadError

runner = CliRunner()


@pytest.fixture
def definition_files(tmp_path, base_definition, compare_definition):
    """Base and compare definitions written to disk."""
    base = tmp_path / "base.json"
    compare = tmp_path / "compare.json"
    base.write_text(json.dumps(base_definition), encoding="utf-8")
    compare.write_text(json.dumps(compare_definition), encoding="utf-8")
    return base, compare


@pytest.mark.unit
class TestLoadDefinition:
    """Test definition file loading."""

    def test_bare_definition(self, definition_files):
        definition, label = load_definition(definition_files[0])

        assert label == "base"
        assert [node.id for node in definition.nodes] == ["n1", "n2"]

    def test_version_record(self, tmp_path, base_definition):
        path = tmp_path / "record.json"
        path.write_text(json.dumps({"version": 7, "definition": base_definition}), encoding="utf-8")

        definition, label = load_definition(path)

        assert label == 7
        assert len(definition.edges) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(DefinitionLoadError, match="File not found"):
            load_definition(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{nodes", encoding="utf-8")

        with pytest.raises(DefinitionLoadError, match="Invalid JSON"):
            load_definition(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(DefinitionLoadError):
            load_definition(path)

    def test_invalid_definition(self, tmp_path):
        path = tmp_path / "invalid.json"
        path.write_text(json.dumps({"nodes": [{"data": {}}]}), encoding="utf-8")

        with pytest.raises(DefinitionLoadError, match="Invalid workflow definition"):
            load_definition(path)


@pytest.mark.unit
class TestDiffCommand:
    """Test the diff command."""

    def test_summary(self, definition_files):
        base, compare = definition_files

        result = runner.invoke(app, [
            "diff", str(base), str(compare), "--base-label", "1", "--compare-label", "2",
        ])

        assert result.exit_code == 0
        assert "Comparing v1 → v2" in result.output
        assert "1 node(s) added" in result.output
        assert "1 connection(s) added" in result.output

    def test_no_changes(self, definition_files):
        base, _ = definition_files

        result = runner.invoke(app, ["diff", str(base), str(base)])

        assert result.exit_code == 0
        assert "No changes detected" in result.output

    def test_json_output(self, definition_files):
        base, compare = definition_files

        result = runner.invoke(app, ["diff", str(base), str(compare), "--json"])

        assert result.exit_code == 0
        assert '"total_changes": 4' in result.output

    def test_settings_notice(self, tmp_path, test_data):
        base = tmp_path / "a.json"
        compare = tmp_path / "b.json"
        base.write_text(json.dumps(test_data.definition(settings={"timeout": 1})), encoding="utf-8")
        compare.write_text(json.dumps(test_data.definition(settings={"timeout": 2})), encoding="utf-8")

        result = runner.invoke(app, ["diff", str(base), str(compare)])

        assert result.exit_code == 0
        assert "Workflow settings changed" in result.output

    def test_missing_file(self, tmp_path, definition_files):
        base, _ = definition_files

        result = runner.invoke(app, ["diff", str(base), str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "File not found" in result.output


@pytest.mark.unit
class TestLinesCommand:
    """Test the lines command."""

    def test_unified(self, tmp_path, test_data):
        base = tmp_path / "a.json"
        compare = tmp_path / "b.json"
        base.write_text(json.dumps(test_data.definition(nodes=[test_data.node("n1", "Old")])), encoding="utf-8")
        compare.write_text(json.dumps(test_data.definition(nodes=[test_data.node("n1", "New")])), encoding="utf-8")

        result = runner.invoke(app, ["lines", str(base), str(compare)])

        assert result.exit_code == 0
        assert "+1 -1" in result.output
        assert '"New"' in result.output

    def test_split(self, definition_files):
        base, compare = definition_files

        result = runner.invoke(app, ["lines", str(base), str(compare), "--view", "split"])

        assert result.exit_code == 0
        assert "Base" in result.output
        assert "Compare" in result.output

    def test_without_line_numbers(self, definition_files):
        base, compare = definition_files

        result = runner.invoke(app, ["lines", str(base), str(compare), "--no-line-numbers"])

        assert result.exit_code == 0


@pytest.mark.unit
class TestPatchCommand:
    """Test the patch command."""

    def test_stdout(self, definition_files):
        base, compare = definition_files

        result = runner.invoke(app, [
            "patch", str(base), str(compare),
            "--base-label", "1", "--compare-label", "2", "--stdout",
        ])

        assert result.exit_code == 0
        assert result.output.startswith("--- workflow v1\n+++ workflow v2\n\n")

    def test_output_file(self, tmp_path, definition_files):
        base, compare = definition_files
        target = tmp_path / "out.patch"

        result = runner.invoke(app, ["patch", str(base), str(compare), "-o", str(target)])

        assert result.exit_code == 0
        assert "Patch written" in result.output
        content = target.read_text(encoding="utf-8")
        assert content.startswith("--- workflow vbase\n+++ workflow vcompare\n")

    def test_labels_from_version_records(self, tmp_path, base_definition, compare_definition):
        base = tmp_path / "v3.json"
        compare = tmp_path / "v4.json"
        base.write_text(json.dumps({"version": 3, "definition": base_definition}), encoding="utf-8")
        compare.write_text(json.dumps({"version": 4, "definition": compare_definition}), encoding="utf-8")
        target = tmp_path / "out.patch"

        result = runner.invoke(app, ["patch", str(base), str(compare), "-o", str(target)])

        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8").startswith("--- workflow v3\n+++ workflow v4\n")


@pytest.mark.unit
class TestInfoCommands:
    """Test version and config commands."""

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "FlowCompare v0.1.0" in result.output

    def test_config(self):
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "FlowCompare Configuration" in result.output
