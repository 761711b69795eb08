"""Main JSEL (JSON S-Expression Language) class."""

import logging
from typing import Mapping, Union

from jsel.jsel_ast import JSELASTNode
from jsel.jsel_builtin_registry import JSELBuiltinRegistry
from jsel.jsel_decoder import JSELDecoder
from jsel.jsel_error import JSELEvalError
from jsel.jsel_evaluator import JSELEvaluator, JSELScoping
from jsel.jsel_math import INTEGER_MIN, INTEGER_MAX
from jsel.jsel_output import JSELOutputWatcher
from jsel.jsel_value import JSELValue, JSELInteger, JSELBoolean, JSELString, JSELBuiltinFunction, JSELClosure


class JSEL:
    """
    JSEL interpreter: evaluates expression trees delivered as JSON documents.

    Each call to an evaluate method decodes the document, builds a fresh
    global environment and walks the tree once. Nothing carries over between
    calls except the configuration.
    """

    def __init__(
        self,
        max_depth: int = 300,
        scoping: JSELScoping = JSELScoping.LEXICAL,
        output: JSELOutputWatcher | None = None,
        initial_bindings: Mapping[str, Union[int, bool, str]] | None = None
    ):
        """
        Initialize the JSEL interpreter.

        Args:
            max_depth: Maximum expression nesting depth
            scoping: Scoping rule for closure calls
            output: Watcher that receives `print` output, stdout when not given
            initial_bindings: Variables the global environment starts with; the
                demonstration variables x, v and i when not given
        """
        self.max_depth = max_depth
        self.scoping = scoping
        self.registry = JSELBuiltinRegistry(output)
        self.decoder = JSELDecoder()
        self.initial_bindings = (
            None if initial_bindings is None
            else {name: self._to_value(value) for name, value in initial_bindings.items()}
        )
        self._logger = logging.getLogger("JSEL")

    @staticmethod
    def _to_value(value: Union[int, bool, str]) -> JSELValue:
        """Convert a Python configuration value into a JSEL value."""
        if isinstance(value, bool):
            return JSELBoolean(value)

        if isinstance(value, int):
            if value < INTEGER_MIN or value > INTEGER_MAX:
                raise ValueError(f"Initial binding {value} is outside the range {INTEGER_MIN} to {INTEGER_MAX}")

            return JSELInteger(value)

        if isinstance(value, str):
            return JSELString(value)

        raise TypeError(f"Initial bindings must be int, bool or str, got {type(value).__name__}")

    def _create_evaluator(self) -> JSELEvaluator:
        return JSELEvaluator(
            registry=self.registry,
            max_depth=self.max_depth,
            scoping=self.scoping,
            initial_bindings=self.initial_bindings
        )

    def decode(self, document: str) -> JSELASTNode:
        """
        Decode a JSON document into an expression tree without evaluating it.

        Raises:
            JSELDecodeError: If the document is malformed
        """
        return self.decoder.decode(document)

    def evaluate_ast(self, expr: JSELASTNode) -> JSELValue:
        """
        Evaluate an already-decoded expression tree.

        Args:
            expr: Root expression

        Returns:
            The result as a JSEL value

        Raises:
            JSELEvalError: If evaluation fails
        """
        evaluator = self._create_evaluator()
        try:
            return evaluator.evaluate(expr)

        except JSELEvalError as e:
            self._logger.debug("Evaluation of %s failed: %s", expr.tag(), e.message)
            raise

    def evaluate(self, document: str) -> Union[int, bool, str, JSELBuiltinFunction, JSELClosure]:
        """
        Evaluate a JSON document.

        Args:
            document: JSON text describing the expression

        Returns:
            The result converted to Python types

        Raises:
            JSELDecodeError: If the document is malformed
            JSELEvalError: If evaluation fails
        """
        return self.evaluate_ast(self.decode(document)).to_python()

    def evaluate_and_format(self, document: str) -> str:
        """
        Evaluate a JSON document and return the textual form of the result.

        Args:
            document: JSON text describing the expression

        Returns:
            Textual form of the result, as `print` would show it

        Raises:
            JSELDecodeError: If the document is malformed
            JSELEvalError: If evaluation fails
        """
        return self.evaluate_ast(self.decode(document)).describe()
