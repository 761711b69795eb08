"""Evaluator for JSEL Abstract Syntax Trees with detailed error messages."""

from dataclasses import replace
from enum import Enum
import logging
from typing import Dict, List, Mapping, Tuple

from jsel.jsel_ast import (
    JSELASTNode, JSELASTNumber, JSELASTString, JSELASTIdentifier, JSELASTApplication,
    JSELASTParameters, JSELASTLambda, JSELASTLet, JSELASTDefine, JSELASTBlock,
    JSELASTCond, JSELASTClause
)
from jsel.jsel_builtin_registry import JSELBuiltinRegistry
from jsel.jsel_call_stack import JSELCallStack
from jsel.jsel_environment import JSELEnvironment
from jsel.jsel_error import JSELEvalError, ErrorMessageBuilder
from jsel.jsel_value import (
    JSELValue, JSELInteger, JSELString, JSELBuiltinFunction, JSELClosure
)


class JSELScoping(Enum):
    """How closure calls see variables."""

    # Calls extend the environment captured when the lambda was evaluated
    LEXICAL = "lexical"

    # Calls extend the caller's environment; arguments are evaluated by the caller
    DYNAMIC = "dynamic"


class JSELEvaluator:
    """Evaluates JSEL Abstract Syntax Trees with detailed error messages."""

    # Variables every fresh global environment starts with
    DEFAULT_BINDINGS: Dict[str, JSELValue] = {
        'x': JSELInteger(10),
        'v': JSELInteger(5),
        'i': JSELInteger(1),
    }

    def __init__(
        self,
        registry: JSELBuiltinRegistry | None = None,
        max_depth: int = 300,
        scoping: JSELScoping = JSELScoping.LEXICAL,
        initial_bindings: Mapping[str, JSELValue] | None = None
    ):
        """
        Initialize evaluator.

        Args:
            registry: Builtin registry shared by every environment, a default one when not given
            max_depth: Maximum expression nesting depth
            scoping: Scoping rule used for closure calls
            initial_bindings: Variables for the global environment, DEFAULT_BINDINGS when not given
        """
        self.registry = registry if registry is not None else JSELBuiltinRegistry()
        self.max_depth = max_depth
        self.scoping = scoping
        self.initial_bindings = dict(self.DEFAULT_BINDINGS if initial_bindings is None else initial_bindings)
        self.call_stack = JSELCallStack()
        self.message_builder = ErrorMessageBuilder()
        self._logger = logging.getLogger("JSELEvaluator")

    def create_global_environment(self) -> JSELEnvironment:
        """
        Create a fresh global environment seeded with the initial bindings.

        Returns:
            New root environment
        """
        return JSELEnvironment(bindings=dict(self.initial_bindings), name="global")

    def evaluate(self, expr: JSELASTNode, env: JSELEnvironment | None = None, depth: int = 0) -> JSELValue:
        """
        Recursively evaluate an expression tree.

        Args:
            expr: Expression to evaluate
            env: Environment for variable lookups, a fresh global environment when not given
            depth: Current nesting depth

        Returns:
            Evaluation result as JSELValue

        Raises:
            JSELEvalError: If evaluation fails
        """
        if env is None:
            env = self.create_global_environment()

        try:
            return self._evaluate_expression(expr, env, depth)

        except JSELEvalError as e:
            self._logger.debug("Evaluation failed: %s", e.message)
            raise

        except RecursionError as e:
            raise JSELEvalError(
                message=f"Expression too deeply nested (max depth: {self.max_depth})",
                context="Python recursion limit reached before the depth limit",
                suggestion="Reduce nesting depth or lower max_depth"
            ) from e

        except Exception as e:
            stack_trace = self.call_stack.format_stack_trace()
            raise JSELEvalError(
                message=f"Unexpected error during evaluation: {e}",
                context=f"Call stack:\n{stack_trace}",
                suggestion="This is an internal error - please report this issue"
            ) from e

        finally:
            self.call_stack.clear()

    def _evaluate_expression(self, expr: JSELASTNode, env: JSELEnvironment, depth: int) -> JSELValue:
        """Internal expression evaluation with type dispatch."""
        if depth > self.max_depth:
            stack_trace = self.call_stack.format_stack_trace()
            raise JSELEvalError(
                message=f"Expression too deeply nested (max depth: {self.max_depth})",
                context=f"Call stack:\n{stack_trace}",
                suggestion="Reduce nesting depth or increase max_depth limit"
            )

        if isinstance(expr, JSELASTNumber):
            return JSELInteger(expr.value)

        if isinstance(expr, JSELASTString):
            return JSELString(expr.value)

        if isinstance(expr, JSELASTIdentifier):
            return self._resolve_identifier(expr.name, env)

        if isinstance(expr, JSELASTApplication):
            return self._evaluate_application(expr, env, depth)

        if isinstance(expr, JSELASTBlock):
            return self._evaluate_block(expr, env, depth)

        if isinstance(expr, JSELASTCond):
            return self._evaluate_cond(expr, env, depth)

        if isinstance(expr, JSELASTLambda):
            return self._evaluate_lambda(expr, env)

        if isinstance(expr, JSELASTLet):
            return self._evaluate_let(expr, env, depth)

        if isinstance(expr, JSELASTDefine):
            return self._evaluate_define(expr, env, depth)

        if isinstance(expr, JSELASTClause):
            raise JSELEvalError(
                message="Invalid clause not wrapped in a cond",
                received=f"Clause: {expr.describe()}",
                expected="Clauses only as direct children of a Cond",
                example=self.message_builder.create_function_example("cond")
            )

        if isinstance(expr, JSELASTParameters):
            raise JSELEvalError(
                message="Invalid parameters not wrapped in a lambda",
                received=f"Parameters: {expr.describe()}",
                expected="Parameters only as the first child of a Lambda",
                example=self.message_builder.create_function_example("lambda")
            )

        raise JSELEvalError(
            message=f"Invalid expression type: {type(expr).__name__}",
            expected="One of the JSEL expression node types"
        )

    def _resolve_identifier(self, name: str, env: JSELEnvironment) -> JSELValue:
        """
        Resolve an identifier.

        Variables win over builtins. A name bound nowhere evaluates to a string
        holding the name itself.
        """
        value = env.lookup(name)
        if value is not None:
            return value

        if self.registry.has_function(name):
            return self.registry.get_function(name)

        return JSELString(name)

    def _evaluate_application(self, app: JSELASTApplication, env: JSELEnvironment, depth: int) -> JSELValue:
        """Evaluate a function application."""
        if not app.elements:
            raise JSELEvalError(
                message="Empty application",
                received="()",
                expected="A callee followed by its arguments",
                example=self.message_builder.create_function_example("add")
            )

        func_value = self._evaluate_expression(app.callee(), env, depth + 1)
        return self._call_function(func_value, app.arguments(), env, depth)

    def _call_function(
        self,
        func: JSELValue,
        arg_exprs: Tuple[JSELASTNode, ...],
        env: JSELEnvironment,
        depth: int
    ) -> JSELValue:
        """
        Apply a callee value to unevaluated argument expressions.

        Args:
            func: Evaluated callee
            arg_exprs: Argument expressions, evaluated left to right
            env: Caller's environment
            depth: Current nesting depth

        Returns:
            Function result
        """
        if isinstance(func, JSELBuiltinFunction):
            return self._call_builtin_function(func, arg_exprs, env, depth)

        if isinstance(func, JSELClosure):
            return self._call_closure(func, arg_exprs, env, depth)

        suggestion = "Only builtins and lambdas can be called"
        if isinstance(func, JSELString):
            similar = self.message_builder.suggest_similar_functions(func.value, self.registry.get_all_names())
            if similar:
                suggestion = f"Did you mean: {', '.join(similar)}?"

        raise JSELEvalError(
            message="Not a function",
            received=f"Trying to call {func.type_name()}: {func.describe()}",
            expected="Function (builtin or lambda)",
            suggestion=suggestion
        )

    def _call_builtin_function(
        self,
        func: JSELBuiltinFunction,
        arg_exprs: Tuple[JSELASTNode, ...],
        env: JSELEnvironment,
        depth: int
    ) -> JSELValue:
        """Call a builtin: check arity, evaluate arguments in the caller's environment, run it."""
        if len(arg_exprs) != func.arity:
            raise JSELEvalError(
                message=f"Expected {func.arity} arguments",
                received=f"'{func.name}' called with {len(arg_exprs)}: "
                    f"{' '.join(arg.describe() for arg in arg_exprs) or '(no arguments)'}",
                example=self.message_builder.create_function_example(func.name)
            )

        arg_values: List[JSELValue] = [self._evaluate_expression(arg, env, depth + 1) for arg in arg_exprs]

        try:
            return func.native_impl(arg_values)

        except JSELEvalError:
            raise

        except Exception as e:
            raise JSELEvalError(
                message=f"Error in built-in function '{func.name}'",
                context=str(e),
                suggestion="This is an internal error - please report this issue"
            ) from e

    def _call_closure(
        self,
        func: JSELClosure,
        arg_exprs: Tuple[JSELASTNode, ...],
        env: JSELEnvironment,
        depth: int
    ) -> JSELValue:
        """
        Call a closure.

        Every call gets a fresh frame, so the captured environment is never
        modified and a closure can be called any number of times. With lexical
        scoping each argument is evaluated in the new frame, which already
        holds the parameters bound earlier in the same call.
        """
        if len(arg_exprs) != func.arity():
            param_list = " ".join(func.parameters) if func.parameters else "(no parameters)"
            raise JSELEvalError(
                message=f"Expected {func.arity()} arguments",
                received=f"Got {len(arg_exprs)}: {' '.join(arg.describe() for arg in arg_exprs) or '(no arguments)'}",
                expected=f"Parameters: {param_list}",
                suggestion=f"Provide exactly {func.arity()} argument{'s' if func.arity() != 1 else ''}"
            )

        if self.scoping is JSELScoping.LEXICAL:
            call_env = func.closure_environment.child(f"{func.name}-call")
            arg_env = call_env

        else:
            call_env = env.child(f"{func.name}-call")
            arg_env = env

        param_bindings: Dict[str, JSELValue] = {}
        self.call_stack.push(
            function_name=func.name,
            arguments=param_bindings,
            expression=func.body.describe()
        )

        self._logger.debug(
            "Calling %s with %d arguments (%s scoping, call depth %d, environment depth %d)",
            func.name, len(arg_exprs), self.scoping.value, self.call_stack.depth(), call_env.depth()
        )

        try:
            for param, arg in zip(func.parameters, arg_exprs):
                arg_value = self._evaluate_expression(arg, arg_env, depth + 1)
                call_env.bind(param, arg_value)
                param_bindings[param] = arg_value

            return self._evaluate_expression(func.body, call_env, depth + 1)

        except (JSELEvalError, RecursionError):
            raise

        except Exception as e:
            # Frames are popped while unwinding, so record the trace while this one is live
            stack_trace = self.call_stack.format_stack_trace()
            raise JSELEvalError(
                message=f"Unexpected error during evaluation: {e}",
                context=f"Call stack:\n{stack_trace}",
                suggestion="This is an internal error - please report this issue"
            ) from e

        finally:
            self.call_stack.pop()

    def _evaluate_block(self, block: JSELASTBlock, env: JSELEnvironment, depth: int) -> JSELValue:
        """Evaluate a block's expressions in order, keeping the last value."""
        result: JSELValue = JSELInteger(0)
        for expr in block.elements:
            result = self._evaluate_expression(expr, env, depth + 1)

        return result

    def _evaluate_cond(self, cond: JSELASTCond, env: JSELEnvironment, depth: int) -> JSELValue:
        """Evaluate the consequence of the first clause whose condition is true."""
        for i, clause in enumerate(cond.clauses):
            if not isinstance(clause, JSELASTClause):
                raise JSELEvalError(
                    message="Invalid clause",
                    received=f"Cond child {i+1}: {clause.describe()} ({clause.tag()})",
                    expected="Clause",
                    example=self.message_builder.create_function_example("cond")
                )

            if len(clause.elements) != 2:
                raise JSELEvalError(
                    message="Each clause must have exactly 2 expressions",
                    received=f"Clause {i+1}: {clause.describe()} (has {len(clause.elements)} expressions)",
                    expected="[condition consequence]",
                    example=self.message_builder.create_function_example("cond")
                )

            condition, consequence = clause.elements
            if self._evaluate_expression(condition, env, depth + 1).is_true():
                return self._evaluate_expression(consequence, env, depth + 1)

        raise JSELEvalError(
            message="No true clause",
            received=cond.describe(),
            suggestion="Add a final clause whose condition is true",
            example=self.message_builder.create_function_example("cond")
        )

    def _evaluate_lambda(self, lambda_expr: JSELASTLambda, env: JSELEnvironment) -> JSELClosure:
        """Build a closure over a snapshot of the current environment."""
        if len(lambda_expr.elements) != 2:
            raise JSELEvalError(
                message="Lambda must have exactly 2 expressions",
                received=f"Got {len(lambda_expr.elements)}: {lambda_expr.describe()}",
                expected="Parameters followed by a body",
                example=self.message_builder.create_function_example("lambda")
            )

        param_expr, body = lambda_expr.elements
        if not isinstance(param_expr, JSELASTParameters):
            raise JSELEvalError(
                message="Invalid parameters",
                received=f"{param_expr.describe()} ({param_expr.tag()})",
                expected="Parameters node",
                example=self.message_builder.create_function_example("lambda")
            )

        parameters: List[str] = []
        for i, param in enumerate(param_expr.elements):
            if not isinstance(param, JSELASTIdentifier):
                raise JSELEvalError(
                    message="Invalid parameter",
                    received=f"Parameter {i+1}: {param.describe()} ({param.tag()})",
                    expected="Identifier",
                    example=self.message_builder.create_function_example("lambda")
                )

            parameters.append(param.name)

        if len(parameters) != len(set(parameters)):
            duplicates = sorted({p for p in parameters if parameters.count(p) > 1})
            raise JSELEvalError(
                message="Duplicate parameter",
                received=f"Duplicate parameters: {', '.join(duplicates)}",
                expected="All parameter names should be different"
            )

        return JSELClosure(
            parameters=tuple(parameters),
            body=body,
            closure_environment=env.snapshot()
        )

    def _binding_name(self, name_expr: JSELASTNode, form: str) -> str:
        if not isinstance(name_expr, JSELASTIdentifier):
            raise JSELEvalError(
                message="Invalid variable name",
                received=f"{name_expr.describe()} ({name_expr.tag()})",
                expected="Identifier",
                example=self.message_builder.create_function_example(form)
            )

        return name_expr.name

    def _bind(self, env: JSELEnvironment, name: str, value: JSELValue) -> None:
        # Anonymous closures take the name they are first bound to, for call stack traces
        if isinstance(value, JSELClosure) and value.name == "<lambda>":
            value = replace(value, name=name)

        env.bind(name, value)

    def _evaluate_let(self, let_expr: JSELASTLet, env: JSELEnvironment, depth: int) -> JSELValue:
        """
        Evaluate a let.

        The binding goes into the current environment rather than a new frame,
        so it stays visible after the let's body has been evaluated.
        """
        name = self._binding_name(let_expr.name, "let")
        value = self._evaluate_expression(let_expr.value, env, depth + 1)
        self._bind(env, name, value)
        return self._evaluate_expression(let_expr.body, env, depth + 1)

    def _evaluate_define(self, define_expr: JSELASTDefine, env: JSELEnvironment, depth: int) -> JSELValue:
        """Evaluate a define, binding into the current environment."""
        name = self._binding_name(define_expr.name, "define")
        value = self._evaluate_expression(define_expr.value, env, depth + 1)
        self._bind(env, name, value)
        return JSELInteger(0)
