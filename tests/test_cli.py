"""
CLI 指令測試：convert / preview / pull 以暫存檔與 mock 的 Figma API 執行。
"""
import argparse
import json
import pytest
from unittest.mock import MagicMock, patch

from symbol_forge.cli import cmd_preview, cmd_pull, perform_convert


def icon(name, bounding_box=True):
    children = [{"id": f"v-{name}", "type": "VECTOR", "name": name, "width": 20, "height": 20}]
    if bounding_box:
        children.insert(0, {"id": f"b-{name}", "type": "RECTANGLE", "name": "Bounding box"})
    return {"id": f"g-{name}", "type": "GROUP", "name": name, "width": 24, "height": 24,
            "children": children}


def write_doc(tmp_path, children, selection=()):
    path = tmp_path / "icons.json"
    path.write_text(json.dumps({"name": "Page 1", "children": children,
                                "selection": list(selection)}), encoding="utf-8")
    return path


def read_json(path):
    return json.loads(path.read_text(encoding="utf-8"))


# ─── convert ─────────────────────────────────────────────────────────────────

class TestConvert:

    def test_converts_stored_selection(self, tmp_path):
        doc = write_doc(tmp_path, [icon("home"), icon("broken", bounding_box=False)],
                        selection=["g-home", "g-broken"])
        out = tmp_path / "out.json"
        args = argparse.Namespace(select=None, output=str(out))

        summary = perform_convert(str(doc), args, {})

        assert (summary.converted, summary.skipped) == (1, 1)
        data = read_json(out)
        names = [c["name"] for c in data["children"]]
        assert names == ["broken", "Icons"]
        icons = data["children"][1]
        assert icons["width"] == 600
        assert icons["children"][0]["name"] == "Home"
        assert icons["children"][0]["type"] == "COMPONENT"
        assert icons["children"][0]["children"][0]["name"] == "Path"
        assert data["selection"] == ["g-broken"]

    def test_select_flag_overrides_document(self, tmp_path):
        doc = write_doc(tmp_path, [icon("home"), icon("star")], selection=["g-home"])
        out = tmp_path / "out.json"
        args = argparse.Namespace(select=["star"], output=str(out))

        summary = perform_convert(str(doc), args, {})
        assert (summary.converted, summary.skipped) == (1, 0)
        names = [c["name"] for c in read_json(out)["children"]]
        assert names == ["home", "Icons"]

    def test_config_controls_container(self, tmp_path):
        doc = write_doc(tmp_path, [icon("home")], selection=["g-home"])
        out = tmp_path / "out.json"
        args = argparse.Namespace(select=None, output=str(out))
        config = {"container": {"name": "Glyphs", "width": 320}}

        perform_convert(str(doc), args, config)
        container = read_json(out)["children"][0]
        assert container["name"] == "Glyphs"
        assert container["width"] == 320

    def test_default_output_path(self, tmp_path):
        doc = write_doc(tmp_path, [icon("home")], selection=["g-home"])
        perform_convert(str(doc), argparse.Namespace(select=None, output=None), {})
        assert (tmp_path / "icons.converted.json").exists()

    def test_empty_selection_still_saves(self, tmp_path, capsys):
        doc = write_doc(tmp_path, [icon("home")])
        out = tmp_path / "out.json"
        summary = perform_convert(str(doc), argparse.Namespace(select=None, output=str(out)), {})
        assert summary.converted == 0
        assert "Select one or more Material Symbols to convert." in capsys.readouterr().out
        assert [c["name"] for c in read_json(out)["children"]] == ["home"]

    def test_missing_document(self, tmp_path, capsys):
        args = argparse.Namespace(select=None, output=None)
        assert perform_convert(str(tmp_path / "missing.json"), args, {}) is None
        assert "❌" in capsys.readouterr().out

    def test_malformed_document_reported(self, tmp_path, capsys):
        doc = write_doc(tmp_path, ["x"])
        args = argparse.Namespace(select=None, output=None)
        assert perform_convert(str(doc), args, {}) is None
        assert "Failed to load document" in capsys.readouterr().out

    @pytest.mark.parametrize("config", [{"export": "out"}, {"icon": []}, {"figma": 1}])
    def test_non_object_config_sections_ignored(self, tmp_path, config):
        doc = write_doc(tmp_path, [icon("home")], selection=["g-home"])
        summary = perform_convert(str(doc), argparse.Namespace(select=None, output=None), config)
        assert summary.converted == 1
        data = read_json(tmp_path / "icons.converted.json")
        assert data["children"][0]["children"][0]["name"] == "Home"


# ─── preview ─────────────────────────────────────────────────────────────────

def test_preview_prints_tree(tmp_path, capsys):
    doc = write_doc(tmp_path, [icon("home")], selection=["g-home"])
    cmd_preview(argparse.Namespace(document=str(doc)), {})
    out = capsys.readouterr().out
    assert "home  [GROUP]" in out
    assert "Total nodes: 3" in out
    assert "Selected: home" in out


# ─── pull ────────────────────────────────────────────────────────────────────

def pull_args(tmp_path, **kwargs):
    defaults = dict(file_key="ABC", page=None, page_index=None, output=str(tmp_path / "pulled.json"))
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


class TestPull:

    def test_requires_token(self, tmp_path, capsys, monkeypatch):
        monkeypatch.delenv("FIGMA_TOKEN", raising=False)
        cmd_pull(pull_args(tmp_path), {})
        assert "FIGMA_TOKEN" in capsys.readouterr().out
        assert not (tmp_path / "pulled.json").exists()

    def test_writes_document(self, tmp_path):
        figma_data = {"document": {"children": [{
            "id": "0:1", "type": "CANVAS", "name": "Icons page",
            "children": [{"id": "1:1", "type": "GROUP", "name": "home",
                          "absoluteBoundingBox": {"x": 0, "y": 0, "width": 24, "height": 24},
                          "children": []}],
        }]}}
        with patch("symbol_forge.cli.FigmaAPIClient") as MockClient:
            MockClient.return_value.get_file.return_value = figma_data
            cmd_pull(pull_args(tmp_path), {"figma": {"personalAccessToken": "t"}})
            MockClient.assert_called_once_with("t")

        data = read_json(tmp_path / "pulled.json")
        assert data["name"] == "Icons page"
        assert data["children"][0]["name"] == "home"
        assert data["selection"] == []

    def test_friendly_404(self, tmp_path, capsys):
        error = Exception("not found")
        error.response = MagicMock(status_code=404)
        with patch("symbol_forge.cli.FigmaAPIClient") as MockClient:
            MockClient.return_value.get_file.side_effect = error
            cmd_pull(pull_args(tmp_path), {"figma": {"personalAccessToken": "t"}})
        assert "404" in capsys.readouterr().out
        assert not (tmp_path / "pulled.json").exists()

    def test_non_object_sections_fall_back(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FIGMA_TOKEN", "env-token")
        figma_data = {"document": {"children": [{"id": "0:1", "type": "CANVAS", "name": "P"}]}}
        with patch("symbol_forge.cli.FigmaAPIClient") as MockClient:
            MockClient.return_value.get_file.return_value = figma_data
            cmd_pull(pull_args(tmp_path), {"figma": "bad", "export": []})
            MockClient.assert_called_once_with("env-token")
        assert read_json(tmp_path / "pulled.json")["name"] == "P"

    def test_missing_page(self, tmp_path, capsys):
        with patch("symbol_forge.cli.FigmaAPIClient") as MockClient:
            MockClient.return_value.get_file.return_value = {"document": {"children": []}}
            cmd_pull(pull_args(tmp_path), {"figma": {"personalAccessToken": "t"}})
        assert "❌" in capsys.readouterr().out
