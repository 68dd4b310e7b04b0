"""Fixed-width binary framing and base64-url transport encoding for tokens."""

import base64
import struct
from typing import Tuple

from timeseal.exceptions import InvalidToken

TIMESTAMP_SIZE = 4  # 32-bit timestamps

_TIMESTAMP = struct.Struct(">I")
_UINT32_MASK = 0xFFFFFFFF


def pack_timestamp(now: float) -> bytes:
    """Pack ``now`` as whole big-endian seconds. Wraps past 2106."""
    return _TIMESTAMP.pack(int(now) & _UINT32_MASK)


def unpack_timestamp(data: bytes) -> int:
    return _TIMESTAMP.unpack(data)[0]


def encoded_length(raw_size: int) -> int:
    """Length of the padded base64 text for ``raw_size`` bytes."""
    return 4 * ((raw_size + 2) // 3)


def encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode(token: str, raw_size: int) -> bytes:
    """Decode ``token`` into exactly ``raw_size`` bytes.

    Only the canonical encoding of a ``raw_size`` buffer is accepted; anything
    else raises InvalidToken without exposing the underlying decode error.
    """
    if not isinstance(token, str) or len(token) != encoded_length(raw_size):
        raise InvalidToken()
    try:
        raw = base64.urlsafe_b64decode(token)
    except ValueError:
        raise InvalidToken() from None
    if len(raw) != raw_size or encode(raw) != token:
        raise InvalidToken()
    return raw


def split(raw: bytes, offset: int) -> Tuple[bytes, bytes]:
    """Split ``raw`` at a fixed ``offset``."""
    if len(raw) < offset:
        raise InvalidToken()
    return raw[:offset], raw[offset:]
