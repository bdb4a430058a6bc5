"""
Pytest fixtures and configuration.

Shared fixtures for all tests.
"""

import json
import shutil
import tempfile

import pytest

from lottiekit.config.settings import Settings
from lottiekit.parser import parse_document


def static(value):
    """Animatable property holding a constant."""
    return {"a": 0, "k": value}


def animated(*keyframes):
    """Animatable property from keyframe dicts."""
    return {"a": 1, "k": list(keyframes)}


def make_layer(ind, ty=4, **fields):
    """Minimal layer object; extra fields override the defaults."""
    layer = {
        "ty": ty,
        "ind": ind,
        "nm": f"Layer {ind}",
        "ip": 0,
        "op": 60,
        "st": 0,
        "ks": {},
    }
    if ty == 4:
        layer["shapes"] = []
    layer.update(fields)
    return layer


def make_document(**overrides):
    """Minimal valid document: 100x100, frames 0-60 at 30 fps, v4.5.0."""
    document = {
        "v": "4.5.0",
        "fr": 30,
        "ip": 0,
        "op": 60,
        "w": 100,
        "h": 100,
        "layers": [],
    }
    document.update(overrides)
    return document


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def parse_doc(settings):
    """Parse a document dict with isolated settings."""
    def _parse(document, scale=1.0):
        return parse_document(document, scale=scale, settings=settings)
    return _parse


@pytest.fixture
def minimal_document():
    return make_document()


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after test."""
    tmpdir = tempfile.mkdtemp(prefix="test_lottiekit_")
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def composition_file(temp_dir, minimal_document):
    """Minimal document written to disk."""
    path = f"{temp_dir}/anim.json"
    with open(path, "w") as f:
        json.dump(minimal_document, f)
    return path
