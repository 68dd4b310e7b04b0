"""Error types raised by token codecs."""


class TokenError(Exception):
    """Base class for all token errors."""


class ConstructionError(TokenError, ValueError):
    """Key material or algorithm rejected when building a codec."""


class InvalidToken(TokenError):
    """The token failed validation.

    The message is identical for every cause (bad encoding, truncation,
    tampering, wrong identity, wrong key, expiry).
    """

    def __init__(self, message: str = "invalid token") -> None:
        super().__init__(message)


class EncodingFailure(TokenError):
    """The secure random source failed while generating a token."""
