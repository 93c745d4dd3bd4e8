import sys
import os

import pytest

# Put src/ (core.*, patch_engine.*, services.*) and the project root (tests.*) on sys.path.
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.join(_project_root, "src"))
sys.path.insert(0, _project_root)


@pytest.fixture()
def subject() -> dict:
    """The reference subject every history scenario starts from."""
    return {"a": 1, "b": "hello"}


@pytest.fixture()
def p0() -> dict:
    return {"op": "replace", "path": "/a", "value": 2}


@pytest.fixture()
def p1() -> dict:
    return {"op": "replace", "path": "/b", "value": "world"}
