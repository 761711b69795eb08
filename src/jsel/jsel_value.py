"""JSEL Value hierarchy - runtime value types for the language."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Tuple

from jsel.jsel_ast import JSELASTNode


class JSELValue(ABC):
    """
    Abstract base class for all JSEL runtime values.

    All JSEL values are immutable.
    """

    @abstractmethod
    def to_python(self) -> Any:
        """Convert to Python value for operations."""

    @abstractmethod
    def type_name(self) -> str:
        """Return JSEL type name for error messages."""

    @abstractmethod
    def describe(self) -> str:
        """Return the textual form of the value, as printed by the language."""

    def is_true(self) -> bool:
        """
        Check if the value selects a cond clause.

        A condition holds when its textual form is exactly `true`, so both the
        boolean true and the string "true" count.
        """
        return self.describe() == "true"


@dataclass(frozen=True)
class JSELInteger(JSELValue):
    """Represents signed 64-bit integer values."""
    value: int

    def to_python(self) -> int:
        return self.value

    def type_name(self) -> str:
        return "integer"

    def describe(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class JSELBoolean(JSELValue):
    """Represents boolean values."""
    value: bool

    def to_python(self) -> bool:
        return self.value

    def type_name(self) -> str:
        return "boolean"

    def describe(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class JSELString(JSELValue):
    """Represents string values."""
    value: str

    def to_python(self) -> str:
        return self.value

    def type_name(self) -> str:
        return "string"

    def describe(self) -> str:
        return self.value


class JSELBuiltinFunction(JSELValue):
    """
    Represents a built-in function with a fixed arity.

    The native implementation receives the already-evaluated arguments.
    """

    def __init__(self, name: str, arity: int, native_impl: Callable[[List[JSELValue]], JSELValue]):
        """
        Initialize a built-in function.

        Args:
            name: Function name for display and error messages
            arity: Exact number of arguments the function accepts
            native_impl: Python callable that implements the function
        """
        self.name = name
        self.arity = arity
        self.native_impl = native_impl

    def to_python(self) -> 'JSELBuiltinFunction':
        return self

    def type_name(self) -> str:
        return "builtin-function"

    def describe(self) -> str:
        return "<function>"

    def __repr__(self) -> str:
        return f"JSELBuiltinFunction({self.name!r}, arity={self.arity})"


@dataclass(frozen=True)
class JSELClosure(JSELValue):
    """
    Represents a user-defined function (lambda).

    The closure environment is a snapshot taken when the lambda was evaluated,
    so later changes to the defining scope are not visible to the closure.
    """
    parameters: Tuple[str, ...]
    body: JSELASTNode
    closure_environment: Any  # JSELEnvironment, kept as Any to avoid a circular import
    name: str = "<lambda>"

    def to_python(self) -> 'JSELClosure':
        """Functions return themselves as Python values."""
        return self

    def type_name(self) -> str:
        return "function"

    def describe(self) -> str:
        return f"<lambda ({' '.join(self.parameters)}) {self.body.describe()}>"

    def arity(self) -> int:
        """Return the number of parameters the closure expects."""
        return len(self.parameters)
