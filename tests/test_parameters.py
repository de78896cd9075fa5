"""
Tests for parameter definition parsing.
"""

import pytest

from wraith.commands.parameters import (
    ParameterRule,
    parse_parameter,
    parse_structured,
    validate_parameters,
)
from wraith.commands.types import ParameterType
from wraith.errors import ParameterParserError


class TestParseParameter:
    """Tests for the inline definition grammar."""

    def test_plain_name_is_required_string(self):
        rule = parse_parameter("foo")
        assert rule == ParameterRule(name="foo")
        assert rule.required

    def test_optional_marker(self):
        rule = parse_parameter("-foo")
        assert rule.optional
        assert rule.default is None

    def test_repeated_markers_collapse(self):
        assert parse_parameter("--foo").optional
        assert not parse_parameter("++foo").optional
        assert parse_parameter("foo**").repeatable
        assert parse_parameter("foo++").literal

    def test_explicit_required_marker(self):
        rule = parse_parameter("+foo")
        assert rule.required
        assert rule.name == "foo"

    def test_type_tag(self):
        assert parse_parameter("(int) count").type is ParameterType.INTEGER
        assert parse_parameter("( number ) x").type is ParameterType.NUMBER
        assert parse_parameter("-(bool) flag").type is ParameterType.BOOLEAN

    def test_unknown_type_tag(self):
        with pytest.raises(ParameterParserError, match="Unrecognized parameter type declaration 'float'"):
            parse_parameter("(float) x")

    def test_repeatable_defaults_to_empty_list(self):
        rule = parse_parameter("items*")
        assert rule.repeatable
        assert rule.default == []
        assert rule.required

    def test_literal_only_for_strings(self):
        assert parse_parameter("(str) text+").literal
        with pytest.raises(ParameterParserError, match="Literals can only be used with string"):
            parse_parameter("(int) text+")

    def test_default_makes_optional_and_converts(self):
        rule = parse_parameter("(int) sides = 6")
        assert rule.optional
        assert rule.default == 6

    def test_quoted_default(self):
        rule = parse_parameter("greeting = 'hello there'")
        assert rule.default == "hello there"

    def test_double_quoted_default(self):
        assert parse_parameter('greeting = "hi, you"').default == "hi, you"

    def test_repeatable_defaults(self):
        rule = parse_parameter("(num) values* = 1 2.5 3")
        assert rule.default == [1, 2.5, 3]
        assert rule.optional

    def test_multiple_defaults_for_single_value(self):
        with pytest.raises(ParameterParserError, match="more than one default"):
            parse_parameter("foo = a b")

    def test_mistyped_default_names_value_and_type(self):
        with pytest.raises(ParameterParserError, match="'abc' is not of the correct type 'integer'"):
            parse_parameter("(int) foo = abc")

    def test_missing_default_value(self):
        with pytest.raises(ParameterParserError, match="Missing default value"):
            parse_parameter("foo =")

    def test_description(self):
        rule = parse_parameter("-(int) count = 3 : How many times")
        assert rule.description == "How many times"
        assert rule.default == 3

    def test_description_keeps_later_colons(self):
        assert parse_parameter("time : format is hh:mm").description == "format is hh:mm"

    def test_colon_inside_quoted_default(self):
        rule = parse_parameter("time = '12:30' : When")
        assert rule.default == "12:30"
        assert rule.description == "When"

    def test_empty_description_is_none(self):
        assert parse_parameter("foo:").description is None

    def test_invalid_names(self):
        with pytest.raises(ParameterParserError, match="must not contain spaces"):
            parse_parameter("two words")
        with pytest.raises(ParameterParserError, match="Invalid parameter name"):
            parse_parameter("na-me")

    def test_empty_definition(self):
        with pytest.raises(ParameterParserError, match="cannot be empty"):
            parse_parameter("   ")

    def test_non_string_definition(self):
        with pytest.raises(TypeError):
            parse_parameter(None)


class TestRoundTrip:
    """Parsing a rule's canonical definition gives back the same rule."""

    @pytest.mark.parametrize("definition", [
        "foo",
        "-foo",
        "(int) count = 3",
        "-(bool) flag : Toggle it",
        "(num) ratio = 0.5",
        "items*",
        "-items*",
        "(int) values* = 1 2 3",
        "text+ : Everything else",
        "greeting = 'hello there' : Say: hi",
        "quote = \"it's\"",
        "empty = ''",
    ])
    def test_to_definition_reparses(self, definition):
        rule = parse_parameter(definition)
        assert parse_parameter(rule.to_definition()) == rule

    def test_str_is_canonical_definition(self):
        rule = parse_parameter("(int) count = 3")
        assert str(rule) == "(integer) count = 3"


class TestParseStructured:
    """Tests for mapping definitions."""

    def test_minimal(self):
        assert parse_structured({"name": "foo"}) == parse_parameter("foo")

    def test_full(self):
        rule = parse_structured({
            "name": "count",
            "type": "int",
            "default": "3",
            "description": "How many",
        })
        assert rule == parse_parameter("(int) count = 3 : How many")

    def test_typed_default_values(self):
        assert parse_structured({"name": "n", "type": "number", "default": 2.5}).default == 2.5

    def test_repeatable_with_defaults(self):
        rule = parse_structured({"name": "xs", "type": "int", "repeatable": True, "default": ["1", 2]})
        assert rule.default == [1, 2]
        assert rule.optional

    def test_unknown_key(self):
        with pytest.raises(ParameterParserError):
            parse_structured({"name": "foo", "colour": "red"})

    def test_bad_type(self):
        with pytest.raises(ParameterParserError, match="Unrecognized parameter type"):
            parse_structured({"name": "foo", "type": "decimal"})

    def test_literal_non_string(self):
        with pytest.raises(ParameterParserError, match="Literals"):
            parse_structured({"name": "foo", "type": "int", "literal": True})

    def test_bool_default_is_not_an_integer(self):
        with pytest.raises(ParameterParserError, match="not of the correct type"):
            parse_structured({"name": "foo", "type": "int", "default": True})


class TestValidateParameters:
    """Tests for cross-parameter invariants."""

    def test_valid_list(self):
        rules = validate_parameters("a", "(int) b", "-c", "d* = x y")
        assert [r.name for r in rules] == ["a", "b", "c", "d"]

    def test_mixed_definitions(self):
        rules = validate_parameters("a", {"name": "b", "optional": True})
        assert rules[1].optional

    def test_repeatable_must_be_last(self):
        with pytest.raises(ParameterParserError, match="Repeatable parameters must be the last parameter in a command: 'items'"):
            validate_parameters("items*", "other")

    @pytest.mark.parametrize("leading", [0, 1, 3])
    def test_repeatable_last_is_accepted(self, leading):
        definitions = [f"p{i}" for i in range(leading)] + ["rest*"]
        assert validate_parameters(*definitions)[-1].repeatable

    def test_literal_must_be_alone(self):
        with pytest.raises(ParameterParserError, match="Literal parameters must be the only parameter in a command: 'text'"):
            validate_parameters("first", "text+")

    def test_required_after_optional(self):
        with pytest.raises(ParameterParserError, match="required parameters after optional parameters in a command: 'b'"):
            validate_parameters("-a", "b")

    def test_duplicate_names(self):
        with pytest.raises(ParameterParserError, match="Duplicate parameter name: 'a'"):
            validate_parameters("a", "-a")

    def test_unsupported_definition(self):
        with pytest.raises(ParameterParserError):
            validate_parameters(42)
