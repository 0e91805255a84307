"""Tests for the archswitch command line."""
# pylint: disable=missing-function-docstring

import builtins
import json

from variant_runtime.probe import MODERN_RUNTIME_MARKER
from variant_tool import main


class TestBuildCommand:

    def test_build_json(self, component_dir, tmp_path, capsys, monkeypatch):
        monkeypatch.chdir(tmp_path)
        out = tmp_path / "dist"
        code = main(["--json", "build", str(component_dir), "--out", str(out), "--flag", "1"])

        assert code == 0
        report = json.loads(capsys.readouterr().out)
        assert report["config"]["selected_variant"] == "modern"
        assert report["elided_paths"] == ["legacy"]
        assert (out / "progress_view" / "modern").is_dir()

    def test_build_reads_env(self, component_dir, tmp_path, capsys, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ARCHSWITCH_NEW_ARCH_ENABLED", "true")
        code = main(["build", str(component_dir), "--out", str(tmp_path / "dist")])

        assert code == 0
        output = capsys.readouterr().out
        assert "Selected:  modern" in output
        assert "Elided:    legacy" in output

    def test_bad_flag_exits_nonzero(self, component_dir, tmp_path, capsys, monkeypatch):
        monkeypatch.chdir(tmp_path)
        code = main(["build", str(component_dir), "--out", str(tmp_path / "dist"),
                     "--flag", "sometimes"])

        assert code == 1
        assert "error: Unrecognized architecture flag" in capsys.readouterr().err
        assert not (tmp_path / "dist").exists()

    def test_report_file(self, component_dir, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        report_path = tmp_path / "report.json"
        code = main(["--json", "-o", str(report_path), "build", str(component_dir),
                     "--out", str(tmp_path / "dist")])

        assert code == 0
        assert json.loads(report_path.read_text())["config"]["flag"] == "unset"


class TestFlagCommand:

    def test_properties_file(self, component_dir, tmp_path, capsys, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "build.properties").write_text("newArchEnabled=false\n")
        assert main(["--json", "flag", str(component_dir)]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["flag"] == "legacy"
        assert result["property_value"] == "false"

    def test_contradiction(self, component_dir, tmp_path, capsys, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ARCHSWITCH_NEW_ARCH_ENABLED", "1")
        (tmp_path / "build.properties").write_text("newArchEnabled=false\n")
        assert main(["flag", str(component_dir)]) == 1
        assert "Contradictory" in capsys.readouterr().err


class TestInspectCommand:

    def test_inconsistent_artifact(self, component_dir, tmp_path, capsys, monkeypatch):
        monkeypatch.chdir(tmp_path)
        out = tmp_path / "dist"
        assert main(["build", str(component_dir), "--out", str(out), "--flag", "legacy"]) == 0
        capsys.readouterr()

        monkeypatch.setattr(builtins, MODERN_RUNTIME_MARKER, True, raising=False)

        assert main(["--json", "inspect", str(out / "progress_view")]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["binding"]["selected_variant"] == "modern"
        assert result["binding"]["compiled_variants"] == ["legacy"]
        assert result["binding"]["consistent"] is False
        assert result["build_config"]["is_new_architecture_enabled"] is False


class TestProbeCommand:

    def test_absent(self, capsys):
        assert main(["probe"]) == 0
        assert "not detected" in capsys.readouterr().out
