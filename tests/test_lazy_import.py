"""Tests for lazy_import / lazy_import_callable.

A throwaway module is written to tmp_path so each test can observe exactly
when the import happens.
"""

import sys
import uuid
from pathlib import Path

import pytest

from pylazy import UnsupportedOperationError, is_materialized, lazy_import, lazy_import_callable

MODULE_SOURCE = """
LOADS = globals().setdefault("LOADS", 0) + 1
ANSWER = 42


def double(x):
    return x * 2


class Greeter:
    def __init__(self, name):
        self.name = name

    def greet(self):
        return f"hello {self.name}"
"""


@pytest.fixture
def heavy_module(tmp_path: Path, monkeypatch):
    name = f"heavy_{uuid.uuid4().hex}"
    (tmp_path / f"{name}.py").write_text(MODULE_SOURCE)
    monkeypatch.syspath_prepend(str(tmp_path))
    yield name
    sys.modules.pop(name, None)


def test_module_not_imported_until_used(heavy_module):
    module = lazy_import(heavy_module)

    assert heavy_module not in sys.modules
    assert module.ANSWER == 42
    assert heavy_module in sys.modules
    assert module.__name__ == heavy_module


def test_module_imported_once(heavy_module):
    module = lazy_import(heavy_module)

    module.ANSWER
    module.double(2)

    assert module.LOADS == 1
    assert sys.modules[heavy_module].LOADS == 1


def test_lazy_function_from_module(heavy_module):
    double = lazy_import_callable(heavy_module, "double")

    assert heavy_module not in sys.modules
    assert double(21) == 42


def test_lazy_class_from_module(heavy_module):
    Greeter = lazy_import_callable(heavy_module, "Greeter")

    greeter = Greeter("pylazy")

    assert greeter.greet() == "hello pylazy"
    assert isinstance(greeter, Greeter)


def test_non_callable_attribute_rejected(heavy_module):
    answer = lazy_import_callable(heavy_module, "ANSWER")

    with pytest.raises(UnsupportedOperationError):
        answer()
    assert not is_materialized(answer)


def test_missing_module_raises_on_first_use():
    module = lazy_import(f"missing_{uuid.uuid4().hex}")

    with pytest.raises(ModuleNotFoundError):
        module.anything
