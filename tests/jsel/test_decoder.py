"""Tests for decoding JSON documents into expression trees."""

import pytest

from jsel import (
    JSELDecoder, JSELDecodeError, JSELError, JSELASTNumber, JSELASTString, JSELASTIdentifier,
    JSELASTApplication, JSELASTParameters, JSELASTLambda, JSELASTLet, JSELASTDefine, JSELASTBlock,
    JSELASTCond, JSELASTClause
)


@pytest.fixture
def decoder():
    """Create a decoder."""
    return JSELDecoder()


class TestDecoderNodes:
    """Test each node tag decodes to the right node."""

    def test_scalars(self, decoder):
        """Test Number, String and Identifier."""
        assert decoder.decode('{"Number": 5}') == JSELASTNumber(5)
        assert decoder.decode('{"Number": -5}') == JSELASTNumber(-5)
        assert decoder.decode('{"String": "foo bar"}') == JSELASTString("foo bar")
        assert decoder.decode('{"Identifier": "zero?"}') == JSELASTIdentifier("zero?")

    def test_unicode_string(self, decoder):
        """Test that strings keep their characters."""
        assert decoder.decode('{"String": "h\\u00e9llo"}') == JSELASTString("héllo")

    def test_application(self, decoder):
        """Test that applications keep their element order."""
        node = decoder.decode('{"Application": [{"Identifier": "add"}, {"Number": 2}, {"Number": 3}]}')
        assert node == JSELASTApplication((JSELASTIdentifier("add"), JSELASTNumber(2), JSELASTNumber(3)))
        assert node.callee() == JSELASTIdentifier("add")
        assert node.arguments() == (JSELASTNumber(2), JSELASTNumber(3))

    def test_lambda(self, decoder):
        """Test lambda and parameters nodes."""
        node = decoder.decode(
            '{"Lambda": [{"Parameters": [{"Identifier": "n"}]}, {"Identifier": "n"}]}'
        )
        assert node == JSELASTLambda((JSELASTParameters((JSELASTIdentifier("n"),)), JSELASTIdentifier("n")))

    def test_let_and_define(self, decoder):
        """Test the positional forms."""
        node = decoder.decode('{"Let": [{"Identifier": "y"}, {"Number": 1}, {"Identifier": "y"}]}')
        assert node == JSELASTLet(JSELASTIdentifier("y"), JSELASTNumber(1), JSELASTIdentifier("y"))

        node = decoder.decode('{"Define": [{"Identifier": "y"}, {"Number": 1}]}')
        assert node == JSELASTDefine(JSELASTIdentifier("y"), JSELASTNumber(1))

    def test_block_cond_clause(self, decoder):
        """Test the remaining sequence forms."""
        node = decoder.decode(
            '{"Block": [{"Cond": [{"Clause": [{"Identifier": "true"}, {"Number": 1}]}]}]}'
        )
        clause = JSELASTClause((JSELASTIdentifier("true"), JSELASTNumber(1)))
        assert node == JSELASTBlock((JSELASTCond((clause,)),))

    @pytest.mark.parametrize("tag,node_class", [
        ("Application", JSELASTApplication),
        ("Parameters", JSELASTParameters),
        ("Lambda", JSELASTLambda),
        ("Block", JSELASTBlock),
        ("Cond", JSELASTCond),
        ("Clause", JSELASTClause),
    ])
    def test_empty_sequences_decode(self, decoder, tag, node_class):
        """Test that sequence shape is left for the evaluator to check."""
        assert decoder.decode(f'{{"{tag}": []}}') == node_class(())

    def test_malformed_shapes_still_decode(self, decoder):
        """Test that lambda and clause shapes are not checked while decoding."""
        node = decoder.decode('{"Lambda": [{"Number": 1}, {"Number": 2}, {"Number": 3}]}')
        assert isinstance(node, JSELASTLambda)
        assert len(node.elements) == 3

    def test_let_name_may_be_any_node(self, decoder):
        """Test that the let name is checked at evaluation time."""
        node = decoder.decode('{"Let": [{"Number": 1}, {"Number": 2}, {"Number": 3}]}')
        assert node == JSELASTLet(JSELASTNumber(1), JSELASTNumber(2), JSELASTNumber(3))

    def test_integer_range_limits(self, decoder):
        """Test the extreme 64-bit values."""
        assert decoder.decode('{"Number": 9223372036854775807}') == JSELASTNumber(9223372036854775807)
        assert decoder.decode('{"Number": -9223372036854775808}') == JSELASTNumber(-9223372036854775808)

    def test_whitespace_is_ignored(self, decoder):
        """Test pretty-printed documents."""
        document = """
        {
            "Application": [
                {"Identifier": "add"},
                {"Number": 1},
                {"Number": 2}
            ]
        }
        """
        assert decoder.decode(document).describe() == "(add 1 2)"

    def test_all_tags(self, decoder):
        """Test the list of understood tags."""
        assert sorted(decoder.all_tags()) == sorted([
            "Number", "String", "Identifier", "Application", "Parameters", "Lambda",
            "Block", "Cond", "Clause", "Let", "Define"
        ])


class TestDecoderErrors:
    """Test malformed documents."""

    def test_invalid_json(self, decoder):
        """Test text that is not JSON at all."""
        with pytest.raises(JSELDecodeError, match="Document is not valid JSON") as exc_info:
            decoder.decode('{"Number": ')

        assert exc_info.value.context.startswith("Line 1, column")

    def test_decode_error_is_jsel_error(self, decoder):
        """Test the exception hierarchy."""
        with pytest.raises(JSELError):
            decoder.decode("[]")

    @pytest.mark.parametrize("document", ['5', '"add"', '[]', 'null', 'true'])
    def test_not_an_object(self, decoder, document):
        """Test that every node must be an object."""
        with pytest.raises(JSELDecodeError, match="Expression must be a JSON object"):
            decoder.decode(document)

    @pytest.mark.parametrize("document", ['{}', '{"Number": 1, "String": "a"}'])
    def test_wrong_key_count(self, decoder, document):
        """Test that a node object has exactly one key."""
        with pytest.raises(JSELDecodeError, match="Expression object must have exactly one key"):
            decoder.decode(document)

    @pytest.mark.parametrize("document", [
        '{"Number": 1, "Number": 2}',
        '{"Application": [{"Identifier": "add"}, {"String": "a", "String": "b"}, {"Number": 1}]}',
    ])
    def test_duplicate_keys(self, decoder, document):
        """Test that an object repeating a key is rejected rather than keeping the last value."""
        with pytest.raises(JSELDecodeError, match="Duplicate key in JSON object"):
            decoder.decode(document)

    @pytest.mark.parametrize("tag", ["Float", "number", "If", ""])
    def test_unknown_tag(self, decoder, tag):
        """Test that tags are case sensitive and closed."""
        with pytest.raises(JSELDecodeError, match="Unknown expression tag"):
            decoder.decode(f'{{"{tag}": []}}')

    @pytest.mark.parametrize("payload", ['1.5', '"5"', 'true', 'null', '[]'])
    def test_bad_number_payload(self, decoder, payload):
        """Test that Number needs a JSON integer."""
        with pytest.raises(JSELDecodeError, match="Number payload must be an integer"):
            decoder.decode(f'{{"Number": {payload}}}')

    @pytest.mark.parametrize("value", ['9223372036854775808', '-9223372036854775809', '100000000000000000000'])
    def test_number_out_of_range(self, decoder, value):
        """Test integers outside the 64-bit range."""
        with pytest.raises(JSELDecodeError, match="Number out of range"):
            decoder.decode(f'{{"Number": {value}}}')

    @pytest.mark.parametrize("tag", ["String", "Identifier"])
    @pytest.mark.parametrize("payload", ['5', 'null', '["a"]', '{"a": 1}'])
    def test_bad_text_payload(self, decoder, tag, payload):
        """Test that String and Identifier need JSON strings."""
        with pytest.raises(JSELDecodeError, match=f"{tag} payload must be a string"):
            decoder.decode(f'{{"{tag}": {payload}}}')

    @pytest.mark.parametrize("tag", ["Application", "Block", "Cond", "Let", "Define"])
    def test_sequence_payload_must_be_array(self, decoder, tag):
        """Test that sequence tags need arrays."""
        with pytest.raises(JSELDecodeError, match=f"{tag} payload must be an array"):
            decoder.decode(f'{{"{tag}": {{"Number": 1}}}}')

    @pytest.mark.parametrize("document,message", [
        ('{"Let": [{"Identifier": "y"}, {"Number": 1}]}', "Let must have exactly 3 elements"),
        ('{"Let": []}', "Let must have exactly 3 elements"),
        ('{"Define": [{"Identifier": "y"}]}', "Define must have exactly 2 elements"),
        ('{"Define": [{"Identifier": "y"}, {"Number": 1}, {"Number": 2}]}', "Define must have exactly 2 elements"),
    ])
    def test_positional_counts(self, decoder, document, message):
        """Test that Let and Define have fixed element counts."""
        with pytest.raises(JSELDecodeError, match=message):
            decoder.decode(document)

    def test_error_path_points_at_bad_node(self, decoder):
        """Test that errors say where in the document they happened."""
        with pytest.raises(JSELDecodeError) as exc_info:
            decoder.decode('{"Application": [{"Identifier": "add"}, {"Number": "2"}]}')

        assert exc_info.value.path == "$.Application[1].Number"
        assert "Path: $.Application[1].Number" in str(exc_info.value)

    def test_error_path_for_nested_non_object(self, decoder):
        """Test paths through several levels."""
        with pytest.raises(JSELDecodeError) as exc_info:
            decoder.decode('{"Block": [{"Number": 1}, {"Lambda": [{"Parameters": [7]}]}]}')

        assert exc_info.value.path == "$.Block[1].Lambda[0].Parameters[0]"

    def test_root_error_path(self, decoder):
        """Test the path of an error at the root."""
        with pytest.raises(JSELDecodeError) as exc_info:
            decoder.decode('[]')

        assert exc_info.value.path == "$"

    def test_deeply_nested_document(self, decoder):
        """Test that pathological nesting is reported rather than crashing."""
        document = '{"Block": [' * 100000 + '{"Number": 1}' + ']}' * 100000
        with pytest.raises(JSELDecodeError, match="nested too deeply"):
            decoder.decode(document)
