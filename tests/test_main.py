"""
Tests for the command line entry point.
"""

import json

import pytest
from click.testing import CliRunner

from main import cli


SQUARE_NODES = [(0, 0.0, 0.0), (1, 1.0, 0.0), (2, 1.0, 1.0), (3, 0.0, 1.0)]
SQUARE_EDGES = [(0, 1), (1, 2), (2, 3), (3, 0)]


@pytest.fixture
def runner():
    return CliRunner()


class TestMapsCommand:
    """Test listing maps."""

    def test_lists_maps(self, runner, tmp_path, write_map):
        write_map("square", SQUARE_NODES, SQUARE_EDGES)
        write_map("line", SQUARE_NODES[:2], SQUARE_EDGES[:1])

        result = runner.invoke(cli, ["maps", "--maps-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert result.output.split() == ["line", "square"]

    def test_no_maps(self, runner, tmp_path):
        result = runner.invoke(cli, ["maps", "--maps-dir", str(tmp_path / "missing")])

        assert result.exit_code == 0
        assert "No maps found" in result.output


class TestRunCommand:
    """Test running the evolution from the command line."""

    def test_run_writes_report(self, runner, tmp_path, write_map):
        write_map("square", SQUARE_NODES, SQUARE_EDGES)
        output = tmp_path / "result.json"

        result = runner.invoke(cli, [
            "run", "square",
            "--maps-dir", str(tmp_path),
            "-g", "5", "-p", "4", "--seed", "1",
            "-o", str(output)
        ])

        assert result.exit_code == 0, result.output
        assert "Evolution finished" in result.output
        assert "Generations: 5" in result.output
        assert "0 uncovered edges" in result.output

        with open(output) as f:
            data = json.load(f)
        assert data["state"] == "completed"
        assert data["generations_completed"] == 5

    def test_unknown_map(self, runner, tmp_path):
        result = runner.invoke(cli, ["run", "nowhere", "--maps-dir", str(tmp_path)])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_parameters(self, runner, tmp_path, write_map):
        write_map("square", SQUARE_NODES, SQUARE_EDGES)

        result = runner.invoke(cli, ["run", "square", "--maps-dir", str(tmp_path), "-p", "1"])

        assert result.exit_code == 1
