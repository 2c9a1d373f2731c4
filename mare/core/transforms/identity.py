"""Binary identifier transforms (object GUIDs and security identifiers)."""
from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Any, Optional

from ..context import ExecutionContext
from ..values import decode_base64_to_bytes, decode_base64_to_guid, parse_sid
from .base import Transform, param


class SidType(enum.Enum):
    ACCOUNT_SID = "AccountSid"
    ACCOUNT_DOMAIN_SID = "AccountDomainSid"


@dataclass(frozen=True)
class Base64ToGUID(Transform):
    """Decode a base64 encoded 16-byte GUID into a UUID value."""
    name = "Base64ToGUID"

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        if value is None:
            return value
        return decode_base64_to_guid(value)


@dataclass(frozen=True)
class SIDToString(Transform):
    """Decode a base64 encoded binary SID into its ``S-1-...`` string.

    With SIDType=AccountDomainSid the domain portion is returned; a SID that is
    not a domain account SID yields an absent value.
    """
    name = "SIDToString"

    sid_type: SidType = param("SIDType", SidType, default=SidType.ACCOUNT_SID)

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        if value is None:
            return value
        sid = parse_sid(decode_base64_to_bytes(value))
        if self.sid_type is SidType.ACCOUNT_SID:
            return sid.value
        domain_sid = sid.account_domain_sid
        return domain_sid.value if domain_sid is not None else None
