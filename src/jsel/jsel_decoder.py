"""Decoder that turns JSON documents into JSEL expression trees.

Documents use one single-key object per node, keyed by the node tag:

    {"Application": [{"Identifier": "add"}, {"Number": 2}, {"Number": 3}]}

`Number`, `String` and `Identifier` carry a scalar; `Let` and `Define` carry
a positional array of 3 and 2 nodes; every other tag carries an array of
child nodes.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Tuple

from jsel.jsel_ast import (
    JSELASTNode, JSELASTNumber, JSELASTString, JSELASTIdentifier, JSELASTApplication,
    JSELASTParameters, JSELASTLambda, JSELASTLet, JSELASTDefine, JSELASTBlock,
    JSELASTCond, JSELASTClause
)
from jsel.jsel_error import JSELDecodeError
from jsel.jsel_math import INTEGER_MIN, INTEGER_MAX


class JSELDecoder:
    """Decodes JSON documents into JSEL AST nodes with detailed error messages."""

    # Tags whose payload is an array of child nodes
    SEQUENCE_TAGS: Dict[str, Callable[[Tuple[JSELASTNode, ...]], JSELASTNode]] = {
        'Application': JSELASTApplication,
        'Parameters': JSELASTParameters,
        'Lambda': JSELASTLambda,
        'Block': JSELASTBlock,
        'Cond': JSELASTCond,
        'Clause': JSELASTClause,
    }

    # Tags whose payload is a fixed-length array of child nodes
    POSITIONAL_TAGS: Dict[str, int] = {
        'Let': 3,
        'Define': 2,
    }

    SCALAR_TAGS = ('Number', 'String', 'Identifier')

    def __init__(self) -> None:
        """Initialize the decoder."""
        self._logger = logging.getLogger("JSELDecoder")

    def all_tags(self) -> list[str]:
        """Get every tag the decoder understands."""
        return list(self.SCALAR_TAGS) + list(self.SEQUENCE_TAGS) + list(self.POSITIONAL_TAGS)

    @staticmethod
    def _reject_duplicate_keys(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
        """Build a JSON object, refusing keys that appear more than once."""
        result: Dict[str, Any] = {}
        for key, value in pairs:
            if key in result:
                raise JSELDecodeError(
                    message=f"Duplicate key in JSON object: '{key}'",
                    received=f"Keys: {', '.join(name for name, _ in pairs)}",
                    expected="Each key at most once per object"
                )

            result[key] = value

        return result

    def decode(self, document: str) -> JSELASTNode:
        """
        Decode a JSON document into an expression tree.

        Args:
            document: JSON text

        Returns:
            Root expression node

        Raises:
            JSELDecodeError: If the text is not JSON or does not describe an expression
        """
        try:
            data = json.loads(document, object_pairs_hook=self._reject_duplicate_keys)

        except json.JSONDecodeError as e:
            raise JSELDecodeError(
                message="Document is not valid JSON",
                received=e.msg,
                context=f"Line {e.lineno}, column {e.colno}",
                example='{"Application": [{"Identifier": "add"}, {"Number": 2}, {"Number": 3}]}'
            ) from e

        except RecursionError as e:
            raise JSELDecodeError(message="Document is nested too deeply") from e

        try:
            node = self.decode_value(data)

        except RecursionError as e:
            raise JSELDecodeError(message="Document is nested too deeply") from e

        self._logger.debug("Decoded document into %s node", node.tag())
        return node

    def decode_value(self, data: Any, path: str = "$") -> JSELASTNode:
        """
        Decode already-parsed JSON data into an expression tree.

        Args:
            data: Parsed JSON value
            path: Location of `data` within the document, for error messages

        Returns:
            Expression node

        Raises:
            JSELDecodeError: If the data does not describe an expression
        """
        if not isinstance(data, dict):
            raise JSELDecodeError(
                message="Expression must be a JSON object",
                received=f"{type(data).__name__}: {json.dumps(data)[:60]}",
                expected="An object with a single node tag",
                example='{"Number": 5}',
                path=path
            )

        if len(data) != 1:
            raise JSELDecodeError(
                message="Expression object must have exactly one key",
                received=f"Keys: {', '.join(sorted(data.keys())) or '(none)'}",
                expected=f"One of: {', '.join(self.all_tags())}",
                path=path
            )

        tag, payload = next(iter(data.items()))
        path = f"{path}.{tag}"

        if tag in self.SCALAR_TAGS:
            return self._decode_scalar(tag, payload, path)

        if tag in self.SEQUENCE_TAGS:
            children = self._decode_children(tag, payload, path)
            return self.SEQUENCE_TAGS[tag](children)

        if tag in self.POSITIONAL_TAGS:
            children = self._decode_children(tag, payload, path)
            expected_count = self.POSITIONAL_TAGS[tag]
            if len(children) != expected_count:
                raise JSELDecodeError(
                    message=f"{tag} must have exactly {expected_count} elements",
                    received=f"{len(children)} elements",
                    expected="name, value, body" if tag == 'Let' else "name, value",
                    path=path
                )

            if tag == 'Let':
                return JSELASTLet(children[0], children[1], children[2])

            return JSELASTDefine(children[0], children[1])

        raise JSELDecodeError(
            message=f"Unknown expression tag: '{tag}'",
            expected=f"One of: {', '.join(self.all_tags())}",
            path=path
        )

    def _decode_scalar(self, tag: str, payload: Any, path: str) -> JSELASTNode:
        if tag == 'Number':
            # bool is a subclass of int, but true/false are not numbers
            if not isinstance(payload, int) or isinstance(payload, bool):
                raise JSELDecodeError(
                    message="Number payload must be an integer",
                    received=f"{type(payload).__name__}: {json.dumps(payload)}",
                    expected="JSON integer",
                    path=path
                )

            if payload < INTEGER_MIN or payload > INTEGER_MAX:
                raise JSELDecodeError(
                    message="Number out of range",
                    received=str(payload),
                    expected=f"An integer between {INTEGER_MIN} and {INTEGER_MAX}",
                    path=path
                )

            return JSELASTNumber(payload)

        if not isinstance(payload, str):
            raise JSELDecodeError(
                message=f"{tag} payload must be a string",
                received=f"{type(payload).__name__}: {json.dumps(payload)}",
                expected="JSON string",
                path=path
            )

        if tag == 'String':
            return JSELASTString(payload)

        return JSELASTIdentifier(payload)

    def _decode_children(self, tag: str, payload: Any, path: str) -> Tuple[JSELASTNode, ...]:
        if not isinstance(payload, list):
            raise JSELDecodeError(
                message=f"{tag} payload must be an array",
                received=f"{type(payload).__name__}: {json.dumps(payload)[:60]}",
                expected="JSON array of expressions",
                path=path
            )

        return tuple(self.decode_value(child, f"{path}[{i}]") for i, child in enumerate(payload))
