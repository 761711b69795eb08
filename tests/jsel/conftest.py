"""Shared fixtures and utilities for JSEL tests."""

import json
from typing import Any, Dict, List

import pytest

from jsel import JSEL, JSELBufferingOutputWatcher, JSELScoping


@pytest.fixture
def output():
    """Collect anything the program prints."""
    return JSELBufferingOutputWatcher()


@pytest.fixture
def jsel(output):
    """Create a fresh JSEL instance whose print output is buffered."""
    return JSEL(output=output)


@pytest.fixture
def jsel_custom(output):
    """Factory for JSEL instances with custom configuration."""
    def _create_jsel(
        max_depth: int = 300,
        scoping: JSELScoping = JSELScoping.LEXICAL,
        initial_bindings: Dict[str, Any] | None = None
    ) -> JSEL:
        return JSEL(max_depth=max_depth, scoping=scoping, output=output, initial_bindings=initial_bindings)
    return _create_jsel


class JSELTestHelpers:
    """Builders for JSON expression documents."""

    @staticmethod
    def num(value: int) -> Dict[str, Any]:
        return {"Number": value}

    @staticmethod
    def string(value: str) -> Dict[str, Any]:
        return {"String": value}

    @staticmethod
    def ident(name: str) -> Dict[str, Any]:
        return {"Identifier": name}

    @staticmethod
    def app(*elements: Dict[str, Any]) -> Dict[str, Any]:
        return {"Application": list(elements)}

    @staticmethod
    def call(name: str, *args: Dict[str, Any]) -> Dict[str, Any]:
        """Application whose callee is an identifier."""
        return {"Application": [{"Identifier": name}, *args]}

    @staticmethod
    def params(*names: str) -> Dict[str, Any]:
        return {"Parameters": [{"Identifier": name} for name in names]}

    @staticmethod
    def lam(names: List[str], body: Dict[str, Any]) -> Dict[str, Any]:
        return {"Lambda": [JSELTestHelpers.params(*names), body]}

    @staticmethod
    def let(name: str, value: Dict[str, Any], body: Dict[str, Any]) -> Dict[str, Any]:
        return {"Let": [{"Identifier": name}, value, body]}

    @staticmethod
    def define(name: str, value: Dict[str, Any]) -> Dict[str, Any]:
        return {"Define": [{"Identifier": name}, value]}

    @staticmethod
    def block(*elements: Dict[str, Any]) -> Dict[str, Any]:
        return {"Block": list(elements)}

    @staticmethod
    def clause(condition: Dict[str, Any], consequence: Dict[str, Any]) -> Dict[str, Any]:
        return {"Clause": [condition, consequence]}

    @staticmethod
    def cond(*clauses: Dict[str, Any]) -> Dict[str, Any]:
        return {"Cond": list(clauses)}

    @staticmethod
    def doc(node: Dict[str, Any]) -> str:
        """Serialize an expression to a JSON document."""
        return json.dumps(node)


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return JSELTestHelpers
