"""JSEL (JSON S-Expression Language) package."""

# Main API
from jsel.jsel import JSEL

# Exceptions
from jsel.jsel_error import JSELError, JSELDecodeError, JSELEvalError, ErrorMessageBuilder

# AST nodes
from jsel.jsel_ast import (
    JSELASTNode, JSELASTNumber, JSELASTString, JSELASTIdentifier, JSELASTApplication,
    JSELASTParameters, JSELASTLambda, JSELASTLet, JSELASTDefine, JSELASTBlock,
    JSELASTCond, JSELASTClause
)

# Value types
from jsel.jsel_value import (
    JSELValue, JSELInteger, JSELBoolean, JSELString, JSELBuiltinFunction, JSELClosure
)

# Output watchers
from jsel.jsel_output import (
    JSELOutputWatcher, JSELStdoutOutputWatcher, JSELStreamOutputWatcher, JSELBufferingOutputWatcher
)

# Lower-level components (for advanced usage)
from jsel.jsel_decoder import JSELDecoder
from jsel.jsel_environment import JSELEnvironment
from jsel.jsel_builtin_registry import JSELBuiltinRegistry
from jsel.jsel_call_stack import JSELCallStack
from jsel.jsel_evaluator import JSELEvaluator, JSELScoping


__all__ = [
    # Main API
    "JSEL",

    # Exceptions
    "JSELError", "JSELDecodeError", "JSELEvalError", "ErrorMessageBuilder",

    # AST nodes
    "JSELASTNode", "JSELASTNumber", "JSELASTString", "JSELASTIdentifier", "JSELASTApplication",
    "JSELASTParameters", "JSELASTLambda", "JSELASTLet", "JSELASTDefine", "JSELASTBlock",
    "JSELASTCond", "JSELASTClause",

    # Value types
    "JSELValue", "JSELInteger", "JSELBoolean", "JSELString", "JSELBuiltinFunction", "JSELClosure",

    # Output watchers
    "JSELOutputWatcher", "JSELStdoutOutputWatcher", "JSELStreamOutputWatcher", "JSELBufferingOutputWatcher",

    # Lower-level components
    "JSELDecoder", "JSELEnvironment", "JSELBuiltinRegistry", "JSELCallStack", "JSELEvaluator", "JSELScoping"
]
