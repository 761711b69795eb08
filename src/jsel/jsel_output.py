"""JSEL output watcher implementations.

The `print` builtin hands the textual form of its argument to an output
watcher. These are the standard watchers.
"""

import sys
from typing import List, Protocol, TextIO


class JSELOutputWatcher(Protocol):
    """Anything that can receive `print` output."""

    def on_output(self, text: str) -> None:
        """Receive one printed value."""


class JSELStdoutOutputWatcher:
    """Watcher that prints output to stdout."""

    def on_output(self, text: str) -> None:
        """
        Print output to stdout.

        Args:
            text: The textual form of the printed value
        """
        print(text)


class JSELStreamOutputWatcher:
    """Watcher that writes output lines to a text stream."""

    def __init__(self, stream: TextIO | None = None):
        """
        Initialize stream output watcher.

        Args:
            stream: Stream to write to, stdout when not given
        """
        self.stream = stream if stream is not None else sys.stdout

    def on_output(self, text: str) -> None:
        """
        Write output to the stream.

        Args:
            text: The textual form of the printed value
        """
        self.stream.write(text + '\n')
        self.stream.flush()


class JSELBufferingOutputWatcher:
    """Watcher that buffers output for programmatic access."""

    def __init__(self) -> None:
        """Initialize buffering output watcher."""
        self.outputs: List[str] = []

    def on_output(self, text: str) -> None:
        """
        Buffer output.

        Args:
            text: The textual form of the printed value
        """
        self.outputs.append(text)

    def get_outputs(self) -> List[str]:
        """
        Get all buffered output.

        Returns:
            List of printed values
        """
        return self.outputs.copy()

    def clear(self) -> None:
        """Clear all buffered output."""
        self.outputs.clear()
