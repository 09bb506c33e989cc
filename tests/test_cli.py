import io
import json

from edgefmt.cli import main

TREE = {
    "type": "document",
    "children": [
        {"type": "openingTag", "tagName": "div"},
        {"type": "htmlText", "value": "Hello"},
        {"type": "edgeMustache", "value": "{{name}}"},
        {"type": "closingTag", "tagName": "div"},
    ],
}


def _tree_file(tmp_path, data=TREE):
    path = tmp_path / "tree.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_formats_to_stdout(tmp_path, capsys):
    assert main([str(_tree_file(tmp_path))]) == 0
    assert capsys.readouterr().out == "<div>\n    Hello{{ name }}\n</div>\n"


def test_flags_override_config(tmp_path, capsys):
    (tmp_path / ".edgefmt.yaml").write_text("tabWidth: 8\n", encoding="utf-8")
    tree = _tree_file(tmp_path)

    assert main([str(tree)]) == 0
    assert capsys.readouterr().out == "<div>\n        Hello{{ name }}\n</div>\n"

    assert main([str(tree), "--tab-width", "2"]) == 0
    assert capsys.readouterr().out == "<div>\n  Hello{{ name }}\n</div>\n"

    assert main([str(tree), "--use-tabs"]) == 0
    assert capsys.readouterr().out == "<div>\n\tHello{{ name }}\n</div>\n"


def test_explicit_config(tmp_path, capsys):
    cfg = tmp_path / "conf" / "fmt.yml"
    cfg.parent.mkdir()
    cfg.write_text("useTabs: true\n", encoding="utf-8")
    assert main([str(_tree_file(tmp_path)), "--config", str(cfg)]) == 0
    assert capsys.readouterr().out == "<div>\n\tHello{{ name }}\n</div>\n"


def test_output_file(tmp_path, capsys):
    out = tmp_path / "out.edge"
    assert main([str(_tree_file(tmp_path)), "-o", str(out)]) == 0
    assert out.read_text(encoding="utf-8") == "<div>\n    Hello{{ name }}\n</div>\n"
    assert capsys.readouterr().out == ""


def test_reads_stdin(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(TREE)))
    assert main(["-"]) == 0
    assert capsys.readouterr().out == "<div>\n    Hello{{ name }}\n</div>\n"


def test_invalid_json_exits_2(tmp_path, capsys):
    path = tmp_path / "tree.json"
    path.write_text("{not json", encoding="utf-8")
    assert main([str(path)]) == 2
    assert "Invalid JSON" in capsys.readouterr().err


def test_malformed_tree_exits_2(tmp_path, capsys):
    assert main([str(_tree_file(tmp_path, {"type": "document", "children": [1]}))]) == 2
    assert "$.children[0]" in capsys.readouterr().err


def test_bad_option_exits_2(tmp_path, capsys):
    assert main([str(_tree_file(tmp_path)), "--tab-width", "-1"]) == 2
    assert "tab_width" in capsys.readouterr().err


def test_missing_file_exits_2(tmp_path, capsys):
    assert main([str(tmp_path / "nope.json")]) == 2
    assert "Cannot read tree" in capsys.readouterr().err
