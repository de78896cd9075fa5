"""
Tests for parameter types.
"""

import pytest

from wraith.commands.types import ParameterType, convert_type, is_type, resolve_type


class TestResolveType:
    """Tests for type name resolution."""

    @pytest.mark.parametrize("name,expected", [
        ("boolean", ParameterType.BOOLEAN),
        ("bool", ParameterType.BOOLEAN),
        ("INT", ParameterType.INTEGER),
        ("integer", ParameterType.INTEGER),
        ("num", ParameterType.NUMBER),
        ("Number", ParameterType.NUMBER),
        ("str", ParameterType.STRING),
        ("string", ParameterType.STRING),
    ])
    def test_aliases_resolve_to_canonical_kinds(self, name, expected):
        assert resolve_type(name) is expected

    def test_unknown_name_returns_none(self):
        assert resolve_type("float") is None

    def test_non_string_name_raises(self):
        with pytest.raises(TypeError):
            resolve_type(5)


class TestIsType:
    """Tests for token type checks."""

    def test_boolean_accepts_true_false_any_case(self):
        assert is_type("true", "boolean")
        assert is_type("FALSE", "bool")
        assert is_type("True", "boolean")

    def test_boolean_rejects_other_words(self):
        assert not is_type("yes", "boolean")
        assert not is_type("1", "boolean")

    @pytest.mark.parametrize("token", ["5", "-10", "+3", "2.5", ".5", "1e3", " 7 ", "-10.5"])
    def test_numeric_tokens(self, token):
        assert is_type(token, "integer")
        assert is_type(token, "number")

    @pytest.mark.parametrize("token", ["hello", "", "nan", "inf", "1e999", "0x10", "1,000"])
    def test_non_numeric_tokens(self, token):
        assert not is_type(token, "number")

    def test_string_accepts_anything(self):
        assert is_type("", "string")
        assert is_type("anything at all", "str")

    def test_non_string_value_raises(self):
        with pytest.raises(TypeError):
            is_type(5, "integer")

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError, match="Unrecognized type"):
            is_type("5", "float")


class TestConvertType:
    """Tests for token conversion."""

    def test_boolean(self):
        assert convert_type("TRUE", "boolean") is True
        assert convert_type("false", "boolean") is False

    def test_integer_truncates_toward_zero(self):
        assert convert_type("42", "integer") == 42
        assert convert_type("-10.5", "integer") == -10
        assert convert_type("9.99", "int") == 9

    def test_number_keeps_integral_values_as_int(self):
        result = convert_type("3", "number")
        assert result == 3
        assert isinstance(result, int)

    def test_number_with_fraction_is_float(self):
        assert convert_type("2.5", "number") == 2.5
        assert convert_type("1e3", "number") == 1000.0

    def test_string_is_unchanged(self):
        assert convert_type("  spaced  ", "string") == "  spaced  "
