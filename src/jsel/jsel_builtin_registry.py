"""
Builtin function registry for JSEL.

This module is the single source of truth for builtin names, their arities
and their implementations. One registry is built per interpreter and shared
by every environment frame; frames never carry builtins themselves.
"""

from typing import Callable, Dict, List

from jsel.jsel_error import JSELEvalError
from jsel.jsel_math import JSELMathFunctions
from jsel.jsel_output import JSELOutputWatcher, JSELStdoutOutputWatcher
from jsel.jsel_value import JSELValue, JSELInteger, JSELBuiltinFunction


class JSELBuiltinRegistry:
    """
    Central registry for all builtin functions.

    The registry is immutable once built. Lookups hand out the same
    JSELBuiltinFunction objects every time.
    """

    # Authoritative list of builtin names and their arities
    BUILTIN_TABLE: Dict[str, int] = {
        'add': 2, 'sub': 2, 'mul': 2, 'div': 2, 'pow': 2,
        'zero?': 1,
        '=': 2, '<': 2, '>': 2, '>=': 2, '<=': 2,
        'print': 1,
    }

    def __init__(self, output: JSELOutputWatcher | None = None) -> None:
        """
        Initialize the builtin registry.

        Args:
            output: Watcher that receives `print` output, stdout when not given
        """
        self.output = output if output is not None else JSELStdoutOutputWatcher()
        self.math_functions = JSELMathFunctions()

        self._registry: Dict[str, JSELBuiltinFunction] = self._build_registry()

    def _build_registry(self) -> Dict[str, JSELBuiltinFunction]:
        """Build the builtin function objects in BUILTIN_TABLE order."""
        functions_dict: Dict[str, Callable[[List[JSELValue]], JSELValue]] = {}
        functions_dict.update(self.math_functions.get_functions())
        functions_dict['print'] = self._builtin_print

        registry = {}
        for name, arity in self.BUILTIN_TABLE.items():
            if name not in functions_dict:
                raise RuntimeError(f"Builtin function '{name}' in BUILTIN_TABLE but not implemented")

            registry[name] = JSELBuiltinFunction(name, arity, functions_dict[name])

        return registry

    def _builtin_print(self, args: List[JSELValue]) -> JSELValue:
        """Implement print: send the value's textual form to the output watcher."""
        if len(args) != 1:
            raise JSELEvalError(f"Expected exactly 1 argument, got {len(args)}")

        self.output.on_output(args[0].describe())
        return JSELInteger(0)

    def get_function(self, name: str) -> JSELBuiltinFunction:
        """
        Get a builtin function by name.

        Args:
            name: Function name

        Returns:
            Builtin function object

        Raises:
            KeyError: If function name is not found
        """
        return self._registry[name]

    def has_function(self, name: str) -> bool:
        """
        Check if a builtin function exists.

        Args:
            name: Function name

        Returns:
            True if function exists, False otherwise
        """
        return name in self._registry

    def get_all_names(self) -> List[str]:
        """
        Get list of all builtin function names.

        Returns:
            List of function names
        """
        return list(self._registry.keys())

    def call_builtin(self, name: str, args: List[JSELValue]) -> JSELValue:
        """
        Call a builtin function by name with already-evaluated arguments.

        Args:
            name: Function name
            args: Already-evaluated arguments

        Returns:
            Function result

        Raises:
            KeyError: If function name is not found
            JSELEvalError: If the argument count is wrong or the function fails
        """
        func = self.get_function(name)
        if len(args) != func.arity:
            raise JSELEvalError(
                message=f"Expected {func.arity} arguments",
                received=f"'{name}' called with {len(args)}"
            )

        return func.native_impl(args)
