"""Tests for the builtin registry."""

import pytest

from jsel import (
    JSELBufferingOutputWatcher, JSELBuiltinFunction, JSELBuiltinRegistry, JSELEvalError,
    JSELInteger, JSELBoolean, JSELString
)
from jsel.jsel_output import JSELStdoutOutputWatcher


class TestBuiltinRegistry:
    """Test registry contents and dispatch."""

    def test_all_builtins_present(self):
        """Test the full set of builtin names."""
        registry = JSELBuiltinRegistry()
        assert sorted(registry.get_all_names()) == sorted([
            "add", "sub", "mul", "div", "pow", "zero?", "=", "<", ">", ">=", "<=", "print"
        ])

    @pytest.mark.parametrize("name,arity", [
        ("add", 2), ("sub", 2), ("mul", 2), ("div", 2), ("pow", 2),
        ("zero?", 1), ("=", 2), ("<", 2), (">", 2), (">=", 2), ("<=", 2), ("print", 1),
    ])
    def test_arities(self, name, arity):
        """Test each builtin's arity."""
        func = JSELBuiltinRegistry().get_function(name)
        assert isinstance(func, JSELBuiltinFunction)
        assert func.name == name
        assert func.arity == arity

    def test_lookup_returns_same_object(self):
        """Test that lookups share function objects."""
        registry = JSELBuiltinRegistry()
        assert registry.get_function("add") is registry.get_function("add")

    def test_unknown_function(self):
        """Test lookups of names that are not builtins."""
        registry = JSELBuiltinRegistry()
        assert not registry.has_function("lambda")
        assert not registry.has_function("Add")
        with pytest.raises(KeyError):
            registry.get_function("nope")

    def test_call_builtin(self):
        """Test calling builtins with evaluated arguments."""
        registry = JSELBuiltinRegistry()
        assert registry.call_builtin("add", [JSELInteger(2), JSELInteger(3)]) == JSELInteger(5)
        assert registry.call_builtin("zero?", [JSELInteger(0)]) == JSELBoolean(True)

    def test_call_builtin_wrong_arity(self):
        """Test the arity check on direct calls."""
        registry = JSELBuiltinRegistry()
        with pytest.raises(JSELEvalError, match="Expected 2 arguments"):
            registry.call_builtin("add", [JSELInteger(2)])

    def test_default_output_is_stdout(self):
        """Test the default print destination."""
        assert isinstance(JSELBuiltinRegistry().output, JSELStdoutOutputWatcher)

    def test_print_uses_output_watcher(self):
        """Test that print hands the textual form to the watcher."""
        output = JSELBufferingOutputWatcher()
        registry = JSELBuiltinRegistry(output)
        assert registry.call_builtin("print", [JSELString("hello")]) == JSELInteger(0)
        assert registry.call_builtin("print", [JSELBoolean(False)]) == JSELInteger(0)
        assert output.get_outputs() == ["hello", "false"]

    def test_default_stdout_print(self, capsys):
        """Test printing with the default watcher."""
        JSELBuiltinRegistry().call_builtin("print", [JSELInteger(7)])
        assert capsys.readouterr().out == "7\n"
