"""Arithmetic and comparison built-in functions for JSEL."""

from typing import Callable, List, Tuple

from jsel.jsel_error import JSELEvalError, ErrorMessageBuilder
from jsel.jsel_value import JSELValue, JSELInteger, JSELBoolean


# Integers are signed 64-bit, matching the range a document can express.
INTEGER_MIN = -(2 ** 63)
INTEGER_MAX = 2 ** 63 - 1


class JSELMathFunctions:
    """Integer arithmetic and comparison built-in functions for JSEL."""

    def get_functions(self) -> dict[str, Callable[[List[JSELValue]], JSELValue]]:
        """Return dictionary of mathematical function implementations."""
        return {
            # Arithmetic functions
            'add': self._builtin_add,
            'sub': self._builtin_sub,
            'mul': self._builtin_mul,
            'div': self._builtin_div,
            'pow': self._builtin_pow,

            # Predicates
            'zero?': self._builtin_zero_p,

            # Comparison functions
            '=': self._builtin_eq,
            '<': self._builtin_lt,
            '>': self._builtin_gt,
            '>=': self._builtin_gte,
            '<=': self._builtin_lte,
        }

    def _expect_args(self, args: List[JSELValue], count: int) -> None:
        if len(args) != count:
            plural = "argument" if count == 1 else "arguments"
            raise JSELEvalError(f"Expected exactly {count} {plural}, got {len(args)}")

    def _ensure_integers(self, args: List[JSELValue], function_name: str) -> Tuple[int, int]:
        """Extract two Python ints, or raise the binary type error."""
        self._expect_args(args, 2)

        left, right = args
        if not isinstance(left, JSELInteger) or not isinstance(right, JSELInteger):
            raise JSELEvalError(
                message=f"Invalid arguments to '{function_name}'",
                received=f"{left.type_name()} {left.describe()!r}, {right.type_name()} {right.describe()!r}",
                expected="Two integers",
                example=ErrorMessageBuilder.create_function_example(function_name)
            )

        return left.value, right.value

    def _ensure_integer(self, args: List[JSELValue], function_name: str) -> int:
        """Extract one Python int, or raise the unary type error."""
        self._expect_args(args, 1)

        arg = args[0]
        if not isinstance(arg, JSELInteger):
            raise JSELEvalError(
                message=f"Invalid argument to '{function_name}'",
                received=f"{arg.type_name()} {arg.describe()!r}",
                expected="An integer",
                example=ErrorMessageBuilder.create_function_example(function_name)
            )

        return arg.value

    def _wrap_integer_result(self, result: int, function_name: str) -> JSELInteger:
        if result < INTEGER_MIN or result > INTEGER_MAX:
            raise JSELEvalError(
                message="Integer overflow",
                received=f"Result of '{function_name}' has {result.bit_length()} bits",
                expected=f"A value between {INTEGER_MIN} and {INTEGER_MAX}"
            )

        return JSELInteger(result)

    # Arithmetic operations
    def _builtin_add(self, args: List[JSELValue]) -> JSELValue:
        """Implement add operation."""
        left, right = self._ensure_integers(args, "add")
        return self._wrap_integer_result(left + right, "add")

    def _builtin_sub(self, args: List[JSELValue]) -> JSELValue:
        """Implement sub operation."""
        left, right = self._ensure_integers(args, "sub")
        return self._wrap_integer_result(left - right, "sub")

    def _builtin_mul(self, args: List[JSELValue]) -> JSELValue:
        """Implement mul operation."""
        left, right = self._ensure_integers(args, "mul")
        return self._wrap_integer_result(left * right, "mul")

    def _builtin_div(self, args: List[JSELValue]) -> JSELValue:
        """Implement div (integer division truncating toward zero) operation."""
        left, right = self._ensure_integers(args, "div")

        if right == 0:
            raise JSELEvalError(
                message="Division by zero",
                received=f"(div {left} 0)",
                suggestion="Guard the division with a cond on (zero? divisor)"
            )

        quotient = abs(left) // abs(right)
        if (left < 0) != (right < 0):
            quotient = -quotient

        # -2**63 / -1 is the one quotient that leaves the range
        return self._wrap_integer_result(quotient, "div")

    def _builtin_pow(self, args: List[JSELValue]) -> JSELValue:
        """Implement pow (integer exponentiation) operation."""
        base, exponent = self._ensure_integers(args, "pow")

        if exponent < 0:
            raise JSELEvalError(
                message="Negative exponent",
                received=f"(pow {base} {exponent})",
                expected="An exponent of 0 or more",
                example=ErrorMessageBuilder.create_function_example("pow")
            )

        # |base| >= 2 with an exponent of 64 or more always overflows
        if abs(base) >= 2 and exponent >= 64:
            raise JSELEvalError(
                message="Integer overflow",
                received=f"(pow {base} {exponent})",
                expected=f"A value between {INTEGER_MIN} and {INTEGER_MAX}"
            )

        return self._wrap_integer_result(base ** exponent, "pow")

    # Predicates
    def _builtin_zero_p(self, args: List[JSELValue]) -> JSELValue:
        """Implement zero? predicate."""
        value = self._ensure_integer(args, "zero?")
        return JSELBoolean(value == 0)

    # Comparison operations
    def _builtin_eq(self, args: List[JSELValue]) -> JSELValue:
        """Implement = (equality) operation."""
        left, right = self._ensure_integers(args, "=")
        return JSELBoolean(left == right)

    def _builtin_lt(self, args: List[JSELValue]) -> JSELValue:
        """Implement < (less than) operation."""
        left, right = self._ensure_integers(args, "<")
        return JSELBoolean(left < right)

    def _builtin_gt(self, args: List[JSELValue]) -> JSELValue:
        """Implement > (greater than) operation."""
        left, right = self._ensure_integers(args, ">")
        return JSELBoolean(left > right)

    def _builtin_gte(self, args: List[JSELValue]) -> JSELValue:
        """Implement >= (greater than or equal) operation."""
        left, right = self._ensure_integers(args, ">=")
        return JSELBoolean(left >= right)

    def _builtin_lte(self, args: List[JSELValue]) -> JSELValue:
        """Implement <= (less than or equal) operation."""
        left, right = self._ensure_integers(args, "<=")
        return JSELBoolean(left <= right)
