"""Exception classes for JSEL (JSON S-Expression Language) with detailed context."""

from typing import List, Optional
import difflib


class JSELError(Exception):
    """Base exception for JSEL errors with detailed context information."""

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
        suggestion: Optional[str] = None,
        example: Optional[str] = None,
        path: Optional[str] = None
    ):
        """
        Initialize detailed error.

        Args:
            message: Core error description
            context: Additional context information
            expected: What was expected
            received: What was actually received
            suggestion: Suggestion for fixing the error
            example: Example of correct usage
            path: Location within the document where the error occurred
        """
        self.message = message
        self.context = context
        self.expected = expected
        self.received = received
        self.suggestion = suggestion
        self.example = example
        self.path = path

        super().__init__(self._format_detailed_message())

    def _format_detailed_message(self) -> str:
        """Format the error message with all available details."""
        parts = [f"Error: {self.message}"]

        if self.path is not None:
            parts.append(f"Path: {self.path}")

        if self.received:
            parts.append(f"Received: {self.received}")

        if self.expected:
            parts.append(f"Expected: {self.expected}")

        if self.context:
            parts.append(f"Context: {self.context}")

        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        if self.example:
            parts.append(f"Example: {self.example}")

        return "\n".join(parts)


class JSELDecodeError(JSELError):
    """Errors turning a JSON document into an expression tree."""


class JSELEvalError(JSELError):
    """Evaluation errors with detailed context."""


class ErrorMessageBuilder:
    """Helper class for building detailed error messages."""

    @staticmethod
    def suggest_similar_functions(target: str, available_functions: List[str], max_suggestions: int = 3) -> List[str]:
        """Suggest similar function names using fuzzy matching."""
        if not target or not available_functions:
            return []

        return difflib.get_close_matches(target, available_functions, n=max_suggestions, cutoff=0.6)

    @staticmethod
    def create_function_example(func_name: str) -> str:
        """Create usage example for a builtin or special form."""
        examples = {
            # Arithmetic
            'add': "(add 2 3) → 5",
            'sub': "(sub 10 3) → 7",
            'mul': "(mul 4 4) → 16",
            'div': "(div 12 3) → 4",
            'pow': "(pow 2 10) → 1024",

            # Comparison
            'zero?': "(zero? 0) → true",
            '=': "(= 1 1) → true",
            '<': "(< 1 2) → true",
            '>': "(> 3 2) → true",
            '<=': "(<= 1 1) → true",
            '>=': "(>= 3 2) → true",

            # I/O
            'print': "(print \"hello\") → 0",

            # Special forms
            'cond': "(cond [(< x 0) \"negative\"] [true \"non-negative\"])",
            'lambda': "((lambda (n) (mul n n)) 4) → 16",
            'let': "(let y 5 (add y 1)) → 6",
            'define': "(define y 5) → 0",
        }

        return examples.get(func_name, f"({func_name} ...)")
