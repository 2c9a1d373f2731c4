import pytest

from mare.core.exceptions import ConfigError, TypeMismatchError
from mare.core.transforms import build_transform
from mare.core.transforms.strings import (
    PadLeft,
    PadRight,
    Replace,
    Substring,
    ToLower,
    ToUpper,
    Trim,
    TrimEnd,
    TrimStart,
)


class TestCaseAndWhitespace:
    @pytest.mark.parametrize(
        "transform, value, expected",
        [
            (ToUpper(), "Alice Smith", "ALICE SMITH"),
            (ToLower(), "Alice SMITH", "alice smith"),
            (Trim(), "  padded\t", "padded"),
            (TrimStart(), "  padded  ", "padded  "),
            (TrimEnd(), "  padded  ", "  padded"),
        ],
    )
    def test_transforms(self, transform, value, expected):
        assert transform.convert(value) == expected

    def test_non_string_scalar_is_converted(self):
        assert ToUpper().convert(True) == "TRUE"
        assert ToLower().convert(42) == "42"

    def test_empty_string_passes_through(self):
        assert Trim().convert("") == ""

    def test_multi_value_rejected(self):
        with pytest.raises(TypeMismatchError):
            ToUpper().convert(["a", "b"])


class TestReplace:
    def test_replaces_every_occurrence(self):
        step = build_transform({"type": "Replace", "OldValue": ".", "NewValue": "_"})
        assert step.convert("a.b.c") == "a_b_c"

    def test_new_value_defaults_to_removal(self):
        assert Replace(old_value="-").convert("555-0100") == "5550100"

    def test_replacement_is_literal(self):
        assert Replace(old_value="$1", new_value="\\1").convert("cost $1") == "cost \\1"

    def test_empty_old_value_rejected(self):
        with pytest.raises(ConfigError):
            build_transform({"type": "Replace", "OldValue": ""})


class TestPadding:
    def test_pad_left_with_char(self):
        step = build_transform({"type": "PadLeft", "TotalWidth": 6, "PaddingChar": "0"})
        assert step.convert("42") == "000042"

    def test_pad_right_defaults_to_space(self):
        assert PadRight(total_width=5).convert("ab") == "ab   "

    def test_only_first_padding_char_used(self):
        assert PadLeft(total_width=4, padding_char="xyz").convert("a") == "xxxa"

    def test_longer_input_unchanged(self):
        assert PadLeft(total_width=2).convert("abcdef") == "abcdef"

    def test_negative_width_rejected(self):
        with pytest.raises(ConfigError):
            build_transform({"type": "PadRight", "TotalWidth": -1})


class TestSubstring:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("abc", ""),
            ("abcde", ""),
            ("abcdefgh", "fgh"),
            ("abcdefghijklmnopq", "fghijklmno"),
        ],
    )
    def test_clamped_to_bounds(self, value, expected):
        assert Substring(start_index=5, length=10).convert(value) == expected

    def test_empty_input(self):
        assert Substring(start_index=0, length=3).convert("") == ""

    def test_string_parameters_coerced(self):
        step = build_transform({"type": "Substring", "StartIndex": "1", "Length": "2"})
        assert step.convert("abcd") == "bc"

    @pytest.mark.parametrize("params", [{"StartIndex": -1, "Length": 1}, {"StartIndex": 0, "Length": -2}])
    def test_negative_rejected(self, params):
        with pytest.raises(ConfigError):
            build_transform({"type": "Substring", **params})
