"""
Tests for the command line interface.
"""

import json

import pytest

from conftest import animated, make_document, make_layer, static
from lottiekit.cli import build_parser, main


@pytest.fixture
def animated_file(temp_dir):
    layers = [
        make_layer(1, ty=3, nm="Root"),
        make_layer(2, nm="Mover", parent=1, ks={
            "p": animated({"t": 0, "s": [0, 0]}, {"t": 10, "s": [100, 0]}),
            "o": static(50),
        }),
    ]
    path = f"{temp_dir}/moving.json"
    with open(path, "w") as f:
        json.dump(make_document(layers=layers), f)
    return path


class TestCli:
    """Test the info and sample commands."""

    def test_info(self, composition_file, capsys):
        assert main(["info", composition_file]) == 0
        out = capsys.readouterr().out
        assert "Duration:  2000 ms" in out
        assert "Version:   4.5.0" in out

    def test_info_with_scale(self, composition_file, capsys):
        assert main(["info", composition_file, "--scale", "2"]) == 0
        assert "200x200" in capsys.readouterr().out

    def test_sample(self, animated_file, capsys):
        assert main(["sample", animated_file, "--layer", "2", "--frame", "5"]) == 0
        out = capsys.readouterr().out
        assert "Mover" in out
        assert "opacity:   50" in out
        assert "parents:   Root" in out

    def test_sample_unknown_layer(self, animated_file, capsys):
        assert main(["sample", animated_file, "--layer", "9"]) == 1
        assert "No top-level layer with id 9" in capsys.readouterr().err

    def test_missing_file(self, temp_dir):
        assert main(["info", f"{temp_dir}/absent.json"]) == 1

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
