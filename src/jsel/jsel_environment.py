"""Environment management for JSEL variable scoping."""

from dataclasses import dataclass, field
from typing import Dict, List

from jsel.jsel_value import JSELValue


@dataclass(eq=False)
class JSELEnvironment:
    """
    Mutable environment frame for variable bindings.

    Frames form a singly-linked chain through `parent`. Lookups walk the chain
    outwards; bindings are only ever written into the frame they are bound in.
    Builtins are not stored here, they live in the builtin registry.
    """
    bindings: Dict[str, JSELValue] = field(default_factory=dict)
    parent: 'JSELEnvironment | None' = None
    name: str = "anonymous"

    def bind(self, name: str, value: JSELValue) -> None:
        """
        Bind a variable in this frame, replacing any existing binding.

        Args:
            name: Variable name
            value: Variable value
        """
        self.bindings[name] = value

    def lookup(self, name: str) -> JSELValue | None:
        """
        Look up a variable in this environment or parent environments.

        Args:
            name: Variable name to look up

        Returns:
            Variable value, or None if no frame in the chain binds the name
        """
        if name in self.bindings:
            return self.bindings[name]

        if self.parent is not None:
            return self.parent.lookup(name)

        return None

    def child(self, name: str = "anonymous") -> 'JSELEnvironment':
        """
        Create an empty frame whose parent is this environment.

        Args:
            name: Name of the new frame, for debugging

        Returns:
            New child environment
        """
        return JSELEnvironment(bindings={}, parent=self, name=name)

    def snapshot(self) -> 'JSELEnvironment':
        """
        Copy the whole chain of frames.

        Values themselves are immutable so copying each frame's mapping is
        enough to isolate the copy from later bindings in the original.

        Returns:
            Independent copy of this environment chain
        """
        parent = self.parent.snapshot() if self.parent is not None else None
        return JSELEnvironment(bindings=dict(self.bindings), parent=parent, name=self.name)

    def has_binding(self, name: str) -> bool:
        """
        Check if a variable has a binding in this environment or parent environments.

        Args:
            name: Variable name to check

        Returns:
            True if variable has a binding, False otherwise
        """
        if name in self.bindings:
            return True

        if self.parent is not None:
            return self.parent.has_binding(name)

        return False

    def get_local_bindings(self) -> Dict[str, JSELValue]:
        """
        Get bindings defined in this environment only (not parents).

        Returns:
            Dictionary of local bindings
        """
        return self.bindings.copy()

    def get_available_bindings(self) -> List[str]:
        """Get all available binding names in this environment chain."""
        available = list(self.bindings.keys())

        if self.parent is not None:
            available.extend(self.parent.get_available_bindings())

        return available

    def depth(self) -> int:
        """Get the number of frames in this chain."""
        if self.parent is None:
            return 1

        return 1 + self.parent.depth()

    def __repr__(self) -> str:
        """String representation for debugging."""
        local_bindings = list(self.bindings.keys())
        parent_info = f" (parent: {self.parent.name})" if self.parent else ""
        return f"JSELEnvironment({self.name}: {local_bindings}{parent_info})"
