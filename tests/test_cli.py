"""
Tests for the command line interface.
"""

import json

import pytest

from trellis.cli import describe, load_graph, main, parse_label
from trellis.core.graph import Graph


@pytest.fixture
def path_file(tmp_path):
    """Fixture providing a DOT file holding the path 1-2-3."""
    target = tmp_path / "path.dot"
    target.write_text("graph { 1 -- 2; 2 -- 3; }", encoding="utf-8")
    return target


@pytest.mark.parametrize(
    "text, expected",
    [("3", 3), ('"3"', "3"), ("abc", "abc"), ("[0, 1]", (0, 1)), ('{"a": 1}', '{"a": 1}')],
)
def test_parse_label(text, expected):
    """Test decoding of labels given on the command line."""
    assert parse_label(text) == expected


def test_describe_empty_graph():
    """Test that an empty graph reports counts only."""
    summary = describe(Graph())
    assert summary["vertices"] == 0
    assert "planar" not in summary


def test_special_then_info(tmp_path, capsys):
    """Test writing a special graph and inspecting it."""
    target = tmp_path / "petersen.dot"

    assert main(["special", "petersen", str(target)]) == 0
    assert f"Wrote petersen (10 vertices) to {target}" in capsys.readouterr().out

    assert main(["info", str(target)]) == 0
    out = capsys.readouterr().out
    assert "vertices: 10" in out
    assert "edges: 15" in out
    assert "planar: False" in out
    assert "degree_sequence: [3, 3, 3, 3, 3, 3, 3, 3, 3, 3]" in out


def test_convert_dot_to_json(tmp_path, path_file):
    """Test conversion between file formats."""
    target = tmp_path / "path.json"

    assert main(["convert", str(path_file), str(target)]) == 0
    graph = load_graph(str(target))
    assert graph.vertices() == [1, 2, 3]
    assert graph.edge_count() == 2
    assert json.loads(target.read_text(encoding="utf-8"))["vertices"]


def test_draw_tree_with_root(tmp_path, path_file):
    """Test drawing a tree hanging from a chosen root."""
    output = tmp_path / "drawing.json"

    assert main(["draw", str(path_file), "--root", "2", "-o", str(output)]) == 0
    data = json.loads(output.read_text(encoding="utf-8"))
    heights = [p["position"][1] for p in data["points"]]
    assert heights[1] == max(heights)
    assert len(data["segments"]) == 2
    assert [lbl["text"] for lbl in data["labels"]] == ["1", "2", "3"]


def test_draw_to_stdout_without_labels(path_file, capsys):
    """Test that a drawing goes to standard output."""
    assert main(["draw", str(path_file), "--style", "circle", "--seed", "3", "--no-labels"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["dimension"] == 2
    assert data["labels"] == []


def test_failures_return_nonzero(tmp_path, capsys):
    """Test that errors are reported instead of raised."""
    petersen = tmp_path / "petersen.json"
    assert main(["special", "petersen", str(petersen)]) == 0
    capsys.readouterr()

    assert main(["draw", str(petersen), "--style", "tree"]) == 1
    assert "Error:" in capsys.readouterr().err
    assert main(["info", str(tmp_path / "missing.dot")]) == 1
    assert "File not found" in capsys.readouterr().err

    binary = tmp_path / "binary.json"
    binary.write_bytes(b"\xff\xfe\x00")
    assert main(["info", str(binary)]) == 1
    assert "not valid UTF-8" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    """Test that running without a command prints usage."""
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out
