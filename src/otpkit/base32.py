"""
RFC 4648 Base32, the text form of OTP secrets.

Authenticator apps and otpauth URIs drop the ``=`` padding and users type
secrets in lower case or in space separated groups, so decoding accepts all
of those.
"""

import base64

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"


def encode(data: bytes) -> str:
    """
    :param data: raw key bytes
    :returns: padded, upper case Base32 text
    """
    if not data:
        raise ValueError("Cannot encode an empty key")
    return base64.b32encode(bytes(data)).decode("ascii")


def decode(secret: str) -> bytes:
    """
    :param secret: Base32 text, padding optional, case-insensitive
    :returns: raw key bytes
    """
    secret = (secret or "").replace(" ", "").rstrip("=")
    if not secret:
        raise ValueError("Base32 secret must not be empty")
    missing_padding = len(secret) % 8
    if missing_padding != 0:
        secret += "=" * (8 - missing_padding)
    try:
        return base64.b32decode(secret, casefold=True)
    except ValueError as e:
        raise ValueError("Invalid Base32 secret") from e
