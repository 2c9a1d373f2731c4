"""Value representation and coercion helpers.

Attribute values flowing through a transform chain use native Python types:

    - Absent:      None
    - Scalar:      str, int, bool, datetime, uuid.UUID
    - Multi-value: list of scalars (ordered, homogeneous)

Hosts may hand over their own multi-valued containers (tuples, sets, value
collections); ``to_multi_value`` normalizes those into a plain list.

Usage:
    values = to_multi_value(("admin1", "user1"))
    guid = decode_base64_to_guid("AAECAwQFBgcICQoLDA0ODw==")
    sid = parse_sid(decode_base64_to_bytes(raw_sid))
    sid.value  # "S-1-5-21-..."
"""
from __future__ import annotations
import base64
import binascii
import re
import struct
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Tuple

from .exceptions import FormatError, TypeMismatchError

SCALAR_TYPES = (str, int, bool, datetime, uuid.UUID)

GUID_BYTE_LENGTH = 16
SID_MAX_SUB_AUTHORITIES = 15
SID_HEADER_LENGTH = 8

NT_AUTHORITY = 5
NT_NON_UNIQUE = 21

_INTEGER_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$")


def is_absent(value: Any) -> bool:
    """Return True when value is the absent marker (None)."""
    return value is None


def is_scalar(value: Any) -> bool:
    """Return True for single indivisible values."""
    return isinstance(value, SCALAR_TYPES)


def is_multi_value(value: Any) -> bool:
    """Return True for list or foreign multi-valued containers."""
    if value is None or isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    return isinstance(value, Iterable)


def to_multi_value(value: Any) -> List[Any]:
    """Coerce a value into an ordered list of scalars.

    Args:
        value: List (returned as-is) or any other multi-valued container

    Returns:
        The same list, or a new list holding the string form of each element
        (absent elements stay None)

    Raises:
        TypeMismatchError: If value is not a multi-valued container
    """
    if isinstance(value, list):
        return value
    if not is_multi_value(value):
        raise TypeMismatchError(
            f"Expected a multi-valued attribute, got {type(value).__name__}"
        )
    return [None if item is None else as_string(item) for item in value]


def as_string(value: Any) -> str:
    """Return the string form of a scalar value.

    Raises:
        TypeMismatchError: If value is multi-valued or not a known scalar
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, (int, uuid.UUID)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if is_multi_value(value):
        raise TypeMismatchError("Expected a single value, got a multi-valued attribute")
    raise TypeMismatchError(f"Unsupported value type: {type(value).__name__}")


def parse_integer(value: Any, bits: int = 64) -> int:
    """Parse a signed integer literal that must fit in ``bits`` bits.

    Raises:
        FormatError: If value is not an integer literal or is out of range
    """
    if isinstance(value, bool):
        raise FormatError(f"Not an integer: {value!r}")
    if isinstance(value, int):
        number = value
    else:
        text = as_string(value)
        if not _INTEGER_PATTERN.match(text):
            raise FormatError(f"Not an integer: {text!r}")
        number = int(text.strip())

    lower = -(1 << (bits - 1))
    upper = (1 << (bits - 1)) - 1
    if number < lower or number > upper:
        raise FormatError(f"Integer {number} does not fit in {bits} bits")
    return number


def to_signed(number: int, bits: int) -> int:
    """Wrap an unbounded integer into a two's complement signed range."""
    mask = (1 << bits) - 1
    number &= mask
    if number >> (bits - 1):
        number -= 1 << bits
    return number


def decode_base64_to_bytes(value: Any) -> bytes:
    """Decode standard base64 text.

    Raises:
        FormatError: On invalid alphabet or padding
    """
    text = as_string(value)
    compact = "".join(text.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FormatError(f"Invalid base64 value: {exc}") from exc


def decode_base64_to_guid(value: Any) -> uuid.UUID:
    """Decode base64 text holding the 16 raw bytes of a GUID.

    Bytes use the mixed-endian GUID layout (first three groups little-endian).

    Raises:
        FormatError: On invalid base64 or when the payload is not 16 bytes
    """
    raw = decode_base64_to_bytes(value)
    if len(raw) != GUID_BYTE_LENGTH:
        raise FormatError(f"GUID requires {GUID_BYTE_LENGTH} bytes, got {len(raw)}")
    return uuid.UUID(bytes_le=raw)


def encode_guid_to_base64(guid: uuid.UUID) -> str:
    """Encode a GUID back into base64 using the mixed-endian byte layout."""
    return base64.b64encode(guid.bytes_le).decode("ascii")


@dataclass(frozen=True)
class SecurityIdentifier:
    """Parsed binary security identifier."""
    revision: int
    authority: int
    sub_authorities: Tuple[int, ...]

    @property
    def value(self) -> str:
        """Canonical ``S-1-...`` string form."""
        if self.authority >= 1 << 32:
            authority = f"0x{self.authority:012X}"
        else:
            authority = str(self.authority)
        parts = [f"S-{self.revision}", authority]
        parts.extend(str(sub) for sub in self.sub_authorities)
        return "-".join(parts)

    @property
    def account_domain_sid(self) -> Optional["SecurityIdentifier"]:
        """Domain portion of an NT domain account SID, or None."""
        if (
            self.authority != NT_AUTHORITY
            or len(self.sub_authorities) < 4
            or self.sub_authorities[0] != NT_NON_UNIQUE
        ):
            return None
        return SecurityIdentifier(self.revision, self.authority, self.sub_authorities[:4])

    def __str__(self) -> str:
        return self.value


def parse_sid(raw: bytes) -> SecurityIdentifier:
    """Parse the binary form of a security identifier.

    Layout: revision (1 byte), sub-authority count (1 byte), identifier
    authority (6 bytes, big-endian), then count * 4-byte little-endian
    sub-authorities.

    Raises:
        FormatError: On wrong revision, count or length
    """
    if len(raw) < SID_HEADER_LENGTH:
        raise FormatError(f"SID requires at least {SID_HEADER_LENGTH} bytes, got {len(raw)}")

    revision = raw[0]
    count = raw[1]
    if revision != 1:
        raise FormatError(f"Unsupported SID revision: {revision}")
    if count > SID_MAX_SUB_AUTHORITIES:
        raise FormatError(f"SID declares {count} sub-authorities (max {SID_MAX_SUB_AUTHORITIES})")

    expected = SID_HEADER_LENGTH + 4 * count
    if len(raw) < expected:
        raise FormatError(f"SID with {count} sub-authorities requires {expected} bytes, got {len(raw)}")

    authority = int.from_bytes(raw[2:8], "big")
    sub_authorities = struct.unpack_from(f"<{count}I", raw, SID_HEADER_LENGTH)
    return SecurityIdentifier(revision, authority, tuple(sub_authorities))
