"""Stateless CSRF token codecs.

A token is a 32-bit timestamp sealed (AES-GCM) or signed (HMAC-SHA256) with the
caller identity as authenticated data, then base64-url encoded. Validation
checks integrity, the identity binding, and freshness against ``max_age``.
Tokens dated in the future are accepted; only staleness is bounded.
"""

import base64
import binascii
import hashlib
import hmac
import logging
import secrets
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Dict, Type, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from timeseal import framing
from timeseal.clock import Clock, system_clock
from timeseal.exceptions import ConstructionError, EncodingFailure, InvalidToken

logger = logging.getLogger("timeseal.codec")

DEFAULT_MAX_AGE = 10 * 60

NONCE_SIZE = 12
TAG_SIZE = 16

KeyMaterial = Union[bytes, str]
Duration = Union[int, float, timedelta]


def _key_bytes(key: KeyMaterial) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    raise ConstructionError(f"key must be bytes or str, not {type(key).__name__}")


KEY_ENCODINGS = ("utf-8", "base64", "hex")


def decode_key(value: str, encoding: str = "utf-8") -> bytes:
    """Turn a configured key string into raw key bytes.

    ``base64`` accepts the URL-safe alphabet (as printed by ``sealctl generate-key``)
    and the standard one.
    """
    if encoding == "utf-8":
        return value.encode("utf-8")
    try:
        if encoding == "base64":
            return base64.urlsafe_b64decode(value.replace("+", "-").replace("/", "_"))
        if encoding == "hex":
            return bytes.fromhex(value)
    except (binascii.Error, ValueError) as exc:
        raise ConstructionError(f"key is not valid {encoding}") from exc
    raise ConstructionError(
        f"Unknown key encoding {encoding!r}, expected one of {', '.join(KEY_ENCODINGS)}"
    )


def _identity_bytes(identity: str) -> bytes:
    return identity.encode("utf-8", "surrogatepass")


class TokenCodec(ABC):
    """Common generate/validate flow shared by the concrete codecs.

    Subclasses define ``raw_size`` and the ``_seal``/``_open`` pair that turns a
    packed timestamp into the framed token bytes and back.
    """

    algorithm = ""
    raw_size = 0

    def __init__(self, *, max_age: Duration = DEFAULT_MAX_AGE, clock: Clock = system_clock) -> None:
        self.max_age = max_age
        self._clock = clock

    @property
    def max_age(self) -> float:
        """Maximum token age in seconds."""
        return self._max_age

    @max_age.setter
    def max_age(self, value: Duration) -> None:
        if isinstance(value, timedelta):
            value = value.total_seconds()
        self._max_age = float(value)

    @property
    def token_length(self) -> int:
        return framing.encoded_length(self.raw_size)

    def generate(self, identity: str) -> str:
        """Return a fresh token bound to ``identity``."""
        stamp = framing.pack_timestamp(self._clock())
        return framing.encode(self._seal(stamp, _identity_bytes(identity)))

    def validate(self, identity: str, token: str) -> None:
        """Raise InvalidToken unless ``token`` is authentic and fresh for ``identity``."""
        if not isinstance(identity, str):
            raise InvalidToken()
        raw = framing.decode(token, self.raw_size)
        try:
            stamp = self._open(raw, _identity_bytes(identity))
        except InvalidToken:
            logger.debug(f"Token failed authentication (algorithm={self.algorithm})")
            raise

        issued_at = framing.unpack_timestamp(stamp)
        if self._clock() - issued_at > self._max_age:
            logger.debug(f"Token expired (issued_at={issued_at}, max_age={self._max_age:g})")
            raise InvalidToken()

    def is_valid(self, identity: str, token: str) -> bool:
        try:
            self.validate(identity, token)
        except InvalidToken:
            return False
        return True

    @abstractmethod
    def _seal(self, stamp: bytes, identity: bytes) -> bytes:
        """Frame a packed timestamp into token bytes."""

    @abstractmethod
    def _open(self, raw: bytes, identity: bytes) -> bytes:
        """Return the packed timestamp from token bytes, or raise InvalidToken."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} algorithm={self.algorithm} max_age={self._max_age:g}>"


class AEADCodec(TokenCodec):
    """AES-GCM codec: ``nonce(12) | ciphertext(4) | tag(16)``, 44 characters."""

    algorithm = "aes-gcm"
    raw_size = NONCE_SIZE + framing.TIMESTAMP_SIZE + TAG_SIZE

    def __init__(self, key: KeyMaterial, **kwargs) -> None:
        key = _key_bytes(key)
        if len(key) not in (16, 24, 32):
            raise ConstructionError(
                f"AES-GCM key must be 128, 192, or 256 bits long, got {len(key) * 8}"
            )
        super().__init__(**kwargs)
        self._aead = AESGCM(key)

    def _seal(self, stamp: bytes, identity: bytes) -> bytes:
        try:
            nonce = secrets.token_bytes(NONCE_SIZE)
        except OSError as exc:
            raise EncodingFailure("secure random source failed") from exc
        return nonce + self._aead.encrypt(nonce, stamp, identity)

    def _open(self, raw: bytes, identity: bytes) -> bytes:
        nonce, sealed = framing.split(raw, NONCE_SIZE)
        try:
            return self._aead.decrypt(nonce, sealed, identity)
        except InvalidTag:
            raise InvalidToken() from None


class HMACCodec(TokenCodec):
    """HMAC-SHA256 codec: ``timestamp(4) | truncated mac(16)``, 28 characters."""

    algorithm = "hmac-sha256"
    raw_size = framing.TIMESTAMP_SIZE + TAG_SIZE

    def __init__(self, key: KeyMaterial, **kwargs) -> None:
        key = _key_bytes(key)
        if not key:
            raise ConstructionError("HMAC key must not be empty")
        super().__init__(**kwargs)
        self._key = key

    def _tag(self, stamp: bytes, identity: bytes) -> bytes:
        return hmac.new(self._key, stamp + identity, hashlib.sha256).digest()[:TAG_SIZE]

    def _seal(self, stamp: bytes, identity: bytes) -> bytes:
        return stamp + self._tag(stamp, identity)

    def _open(self, raw: bytes, identity: bytes) -> bytes:
        stamp, tag = framing.split(raw, framing.TIMESTAMP_SIZE)
        if not hmac.compare_digest(tag, self._tag(stamp, identity)):
            raise InvalidToken()
        return stamp


ALGORITHMS: Dict[str, Type[TokenCodec]] = {
    AEADCodec.algorithm: AEADCodec,
    HMACCodec.algorithm: HMACCodec,
}


def new_codec(key: KeyMaterial, algorithm: str = AEADCodec.algorithm, **kwargs) -> TokenCodec:
    """Build a codec for ``algorithm`` (``aes-gcm`` or ``hmac-sha256``)."""
    try:
        cls = ALGORITHMS[algorithm]
    except KeyError:
        raise ConstructionError(
            f"Unknown algorithm {algorithm!r}, expected one of {', '.join(ALGORITHMS)}"
        ) from None
    return cls(key, **kwargs)


def codec_from_settings(settings, clock: Clock = system_clock) -> TokenCodec:
    """Build a codec from a :class:`timeseal.config.Settings` instance."""
    return new_codec(
        decode_key(settings.secret_key, settings.key_encoding),
        algorithm=settings.algorithm,
        max_age=settings.max_age,
        clock=clock,
    )
