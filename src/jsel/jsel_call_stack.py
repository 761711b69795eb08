"""Call stack tracking for JSEL closure calls."""

from dataclasses import dataclass
from typing import Dict, List

from jsel.jsel_value import JSELValue


class JSELCallStack:
    """
    Call stack for tracking closure calls and providing detailed error messages.
    """

    @dataclass
    class CallFrame:
        """Represents a single closure call frame."""
        function_name: str
        arguments: Dict[str, JSELValue]
        expression: str

    def __init__(self) -> None:
        """Initialize empty call stack."""
        self.frames: List[JSELCallStack.CallFrame] = []

    def push(self, function_name: str, arguments: Dict[str, JSELValue], expression: str = "") -> None:
        """
        Push a new call frame onto the stack.

        Args:
            function_name: Name of the function being called
            arguments: Dictionary of parameter names to values, may still be filling in
            expression: S-expression of the function body
        """
        frame = JSELCallStack.CallFrame(
            function_name=function_name,
            arguments=arguments,
            expression=expression
        )
        self.frames.append(frame)

    def pop(self) -> 'JSELCallStack.CallFrame | None':
        """
        Pop the top call frame from the stack.

        Returns:
            The popped frame, or None if stack is empty
        """
        if self.frames:
            return self.frames.pop()

        return None

    def is_empty(self) -> bool:
        """Check if the call stack is empty."""
        return len(self.frames) == 0

    def depth(self) -> int:
        """Get the current call stack depth."""
        return len(self.frames)

    def clear(self) -> None:
        """Drop all frames."""
        self.frames.clear()

    def format_stack_trace(self, max_frames: int = 10) -> str:
        """
        Format the call stack as a string for error messages.

        Args:
            max_frames: Maximum number of frames to include

        Returns:
            Formatted stack trace string
        """
        if self.is_empty():
            return "  (no function calls)"

        lines = []
        frames_to_show = self.frames[-max_frames:] if len(self.frames) > max_frames else self.frames

        if len(self.frames) > max_frames:
            lines.append(f"  ... ({len(self.frames) - max_frames} more frames)")

        for i, frame in enumerate(frames_to_show):
            indent = "  " + "  " * i
            args_str = ", ".join(f"{k}={v.describe()}" for k, v in frame.arguments.items())
            lines.append(f"{indent}{frame.function_name}({args_str})")

            if frame.expression:
                lines.append(f"{indent}  -> {frame.expression}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"JSELCallStack(depth={len(self.frames)})"
