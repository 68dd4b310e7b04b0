"""Stateless, identity-bound CSRF tokens."""

from timeseal.clock import Clock, FrozenClock, system_clock
from timeseal.codec import AEADCodec, HMACCodec, TokenCodec, codec_from_settings, new_codec
from timeseal.exceptions import ConstructionError, EncodingFailure, InvalidToken, TokenError

__all__ = [
    "AEADCodec",
    "HMACCodec",
    "TokenCodec",
    "new_codec",
    "codec_from_settings",
    "Clock",
    "FrozenClock",
    "system_clock",
    "TokenError",
    "ConstructionError",
    "InvalidToken",
    "EncodingFailure",
]
