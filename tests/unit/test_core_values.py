import base64
import struct
import uuid
from datetime import datetime

import pytest

from mare.core import values
from mare.core.exceptions import FormatError, TypeMismatchError


def _sid_bytes(authority, *subs, count=None):
    count = len(subs) if count is None else count
    return bytes([1, count]) + authority.to_bytes(6, "big") + struct.pack(f"<{len(subs)}I", *subs)


class TestClassifiers:
    @pytest.mark.parametrize("value", ["a", 1, True, uuid.uuid4(), datetime(2020, 1, 1)])
    def test_scalars(self, value):
        assert values.is_scalar(value)
        assert not values.is_absent(value)
        assert not values.is_multi_value(value)

    def test_absent(self):
        assert values.is_absent(None)
        assert not values.is_scalar(None)

    def test_multi_value(self):
        assert values.is_multi_value(["a"])
        assert not values.is_scalar(["a"])


class TestToMultiValue:
    def test_list_is_returned_unchanged(self):
        original = ["a", "b"]
        assert values.to_multi_value(original) is original

    def test_foreign_container_converted_to_strings_in_order(self):
        assert values.to_multi_value(("x", 1, True)) == ["x", "1", "True"]

    def test_absent_elements_kept_as_absent(self):
        assert values.to_multi_value(("a", None, 2)) == ["a", None, "2"]

    def test_generator_is_accepted(self):
        assert values.to_multi_value(str(n) for n in range(3)) == ["0", "1", "2"]

    @pytest.mark.parametrize("value", ["single", 42, None, {"a": 1}, b"raw"])
    def test_non_container_raises(self, value):
        with pytest.raises(TypeMismatchError):
            values.to_multi_value(value)


class TestAsString:
    def test_scalars(self):
        guid = uuid.UUID("03020100-0504-0706-0809-0a0b0c0d0e0f")
        assert values.as_string("abc") == "abc"
        assert values.as_string(7) == "7"
        assert values.as_string(False) == "False"
        assert values.as_string(guid) == "03020100-0504-0706-0809-0a0b0c0d0e0f"
        assert values.as_string(datetime(2020, 1, 2, 3, 4, 5)) == "2020-01-02T03:04:05"

    def test_multi_value_rejected(self):
        with pytest.raises(TypeMismatchError):
            values.as_string(["a"])


class TestParseInteger:
    @pytest.mark.parametrize("raw, expected", [("8", 8), (" -12 ", -12), ("+3", 3), (5, 5)])
    def test_valid(self, raw, expected):
        assert values.parse_integer(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "1.5", "0x10", True])
    def test_invalid(self, raw):
        with pytest.raises(FormatError):
            values.parse_integer(raw)

    def test_range_is_enforced(self):
        assert values.parse_integer("2147483647", bits=32) == 2147483647
        with pytest.raises(FormatError):
            values.parse_integer("2147483648", bits=32)
        with pytest.raises(FormatError):
            values.parse_integer(str(1 << 63))

    def test_to_signed_wraps(self):
        assert values.to_signed(1 << 31, 32) == -2147483648
        assert values.to_signed(-1, 32) == -1
        assert values.to_signed(5, 32) == 5


class TestGuid:
    def test_decode_uses_mixed_endian_layout(self):
        guid = values.decode_base64_to_guid("AAECAwQFBgcICQoLDA0ODw==")
        assert str(guid) == "03020100-0504-0706-0809-0a0b0c0d0e0f"

    def test_round_trip(self):
        encoded = base64.b64encode(uuid.uuid4().bytes_le).decode()
        assert values.encode_guid_to_base64(values.decode_base64_to_guid(encoded)) == encoded

    @pytest.mark.parametrize("raw", ["not base64!", "AAECAw==", "AAECAwQFBgcICQoLDA0ODxA="])
    def test_malformed(self, raw):
        with pytest.raises(FormatError):
            values.decode_base64_to_guid(raw)


class TestSid:
    def test_domain_account_sid(self):
        sid = values.parse_sid(_sid_bytes(5, 21, 1004336348, 1177238915, 682003330, 512))
        assert sid.value == "S-1-5-21-1004336348-1177238915-682003330-512"
        assert sid.account_domain_sid.value == "S-1-5-21-1004336348-1177238915-682003330"

    def test_well_known_sid_has_no_domain(self):
        sid = values.parse_sid(_sid_bytes(5, 18))
        assert str(sid) == "S-1-5-18"
        assert sid.account_domain_sid is None

    def test_large_authority_rendered_as_hex(self):
        sid = values.parse_sid(_sid_bytes(1 << 40, 1))
        assert sid.value == "S-1-0x010000000000-1"

    @pytest.mark.parametrize(
        "raw",
        [
            b"\x01\x01",
            bytes([2, 1]) + (5).to_bytes(6, "big") + struct.pack("<I", 18),
            _sid_bytes(5, 21, 1, count=3),
            bytes([1, 16]) + (5).to_bytes(6, "big") + b"\x00" * 64,
        ],
    )
    def test_malformed(self, raw):
        with pytest.raises(FormatError):
            values.parse_sid(raw)
