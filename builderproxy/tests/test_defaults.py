"""Tests for the primitive default table."""
from typing import List, Optional

import pytest

from builderproxy.core.defaults import (
    NUL,
    PRIMITIVE_DEFAULTS,
    byte,
    char,
    default_for,
    is_primitive,
    long,
    short,
)


class TestPrimitiveDefaults:

    @pytest.mark.parametrize("annotation,expected", [
        (int, 0),
        (long, 0),
        (short, 0),
        (byte, 0),
        (float, 0.0),
        (complex, 0j),
        (char, "\u0000"),
    ])
    def test_zero_values(self, annotation, expected):
        assert default_for(annotation) == expected

    def test_bool_is_false_not_zero_int(self):
        assert default_for(bool) is False

    def test_char_default_is_nul(self):
        assert default_for(char) == NUL
        assert len(NUL) == 1 and ord(NUL) == 0

    @pytest.mark.parametrize("annotation", [str, Optional[int], List[int], object, "int", None])
    def test_non_primitives_default_to_none(self, annotation):
        assert default_for(annotation) is None

    def test_unhashable_annotation_is_not_primitive(self):
        assert is_primitive([int]) is False

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            PRIMITIVE_DEFAULTS[str] = ""  # type: ignore[index]
