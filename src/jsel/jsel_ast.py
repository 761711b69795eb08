"""JSEL AST node hierarchy - the expression tree handed to the evaluator.

Every node is immutable. The evaluator never rewrites nodes; closures hold on
to their body node directly.

Each node can describe itself as a compact s-expression, which is what error
messages and closure renderings show, e.g. `(mul n n)` for
`Application([Identifier("mul"), Identifier("n"), Identifier("n")])`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import json
from typing import Tuple


@dataclass(frozen=True)
class JSELASTNode(ABC):
    """Abstract base class for all JSEL AST nodes."""

    @abstractmethod
    def tag(self) -> str:
        """Return the document tag for this node kind."""

    @abstractmethod
    def describe(self) -> str:
        """Describe the node as an s-expression."""

    def __str__(self) -> str:
        return self.describe()


def _describe_all(nodes: Tuple[JSELASTNode, ...]) -> str:
    return " ".join(node.describe() for node in nodes)


@dataclass(frozen=True)
class JSELASTNumber(JSELASTNode):
    """Integer literal."""
    value: int

    def tag(self) -> str:
        return "Number"

    def describe(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class JSELASTString(JSELASTNode):
    """String literal."""
    value: str

    def tag(self) -> str:
        return "String"

    def describe(self) -> str:
        return json.dumps(self.value, ensure_ascii=False)


@dataclass(frozen=True)
class JSELASTIdentifier(JSELASTNode):
    """Reference to a variable or builtin by name."""
    name: str

    def tag(self) -> str:
        return "Identifier"

    def describe(self) -> str:
        return self.name


@dataclass(frozen=True)
class JSELASTApplication(JSELASTNode):
    """Function application: the first element is the callee, the rest are arguments."""
    elements: Tuple[JSELASTNode, ...] = ()

    def tag(self) -> str:
        return "Application"

    def describe(self) -> str:
        return f"({_describe_all(self.elements)})"

    def callee(self) -> JSELASTNode:
        """Get the callee expression (raises IndexError if empty)."""
        if not self.elements:
            raise IndexError("Cannot get callee of empty application")

        return self.elements[0]

    def arguments(self) -> Tuple[JSELASTNode, ...]:
        """Get the argument expressions."""
        return self.elements[1:]


@dataclass(frozen=True)
class JSELASTParameters(JSELASTNode):
    """Parameter list of a lambda; only meaningful as the first child of a Lambda."""
    elements: Tuple[JSELASTNode, ...] = ()

    def tag(self) -> str:
        return "Parameters"

    def describe(self) -> str:
        return f"({_describe_all(self.elements)})"


@dataclass(frozen=True)
class JSELASTLambda(JSELASTNode):
    """
    Lambda expression.

    A well-formed lambda has exactly two children: a Parameters node and the
    body. The shape is checked when the lambda is evaluated, not when it is
    decoded.
    """
    elements: Tuple[JSELASTNode, ...] = ()

    def tag(self) -> str:
        return "Lambda"

    def describe(self) -> str:
        if not self.elements:
            return "(lambda)"

        return f"(lambda {_describe_all(self.elements)})"


@dataclass(frozen=True)
class JSELASTLet(JSELASTNode):
    """Bind name to value, then evaluate body."""
    name: JSELASTNode
    value: JSELASTNode
    body: JSELASTNode

    def tag(self) -> str:
        return "Let"

    def describe(self) -> str:
        return f"(let {self.name.describe()} {self.value.describe()} {self.body.describe()})"


@dataclass(frozen=True)
class JSELASTDefine(JSELASTNode):
    """Bind name to value in the current scope."""
    name: JSELASTNode
    value: JSELASTNode

    def tag(self) -> str:
        return "Define"

    def describe(self) -> str:
        return f"(define {self.name.describe()} {self.value.describe()})"


@dataclass(frozen=True)
class JSELASTBlock(JSELASTNode):
    """Sequence of expressions; the value of the block is the value of the last one."""
    elements: Tuple[JSELASTNode, ...] = ()

    def tag(self) -> str:
        return "Block"

    def describe(self) -> str:
        if not self.elements:
            return "(block)"

        return f"(block {_describe_all(self.elements)})"


@dataclass(frozen=True)
class JSELASTClause(JSELASTNode):
    """Condition/consequence pair; only meaningful as a direct child of a Cond."""
    elements: Tuple[JSELASTNode, ...] = ()

    def tag(self) -> str:
        return "Clause"

    def describe(self) -> str:
        return f"[{_describe_all(self.elements)}]"


@dataclass(frozen=True)
class JSELASTCond(JSELASTNode):
    """Multi-way conditional over a sequence of clauses."""
    clauses: Tuple[JSELASTNode, ...] = ()

    def tag(self) -> str:
        return "Cond"

    def describe(self) -> str:
        if not self.clauses:
            return "(cond)"

        return f"(cond {_describe_all(self.clauses)})"
