"""TOTP code generation for stored account secrets.

Uses pyotp with its defaults (HMAC-SHA1, 6 digits, 30-second steps).
The current time is only read when the caller does not pass one.
"""

from __future__ import annotations

import binascii
import math
import time
from datetime import datetime

import pyotp

from twofauth.errors import DecodeError
from twofauth.models import DIGITS, INTERVAL, Code

# HOTP counters are 8 bytes; wider values keep their low 64 bits
_COUNTER_MASK = 0xFFFFFFFFFFFFFFFF


def decode_secret(secret: str) -> bytes:
    """Decode a base32 secret into the raw HMAC key."""
    if len(secret) % 8:
        raise DecodeError(f"Invalid base32 secret: length {len(secret)} is not a multiple of 8")
    try:
        return pyotp.TOTP(secret).byte_secret()
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Invalid base32 secret: {exc}") from exc


def unix_seconds(now: datetime | float | None = None) -> int:
    if now is None:
        return int(time.time())
    if isinstance(now, datetime):
        return math.floor(now.timestamp())
    return math.floor(now)


def timecode(seconds: int) -> int:
    return seconds // INTERVAL


def seconds_remaining(seconds: int) -> int:
    """Seconds until the code changes; a fresh window reports the full 30."""
    return INTERVAL - (seconds % INTERVAL)


def generate_code(secret: str, now: datetime | float | None = None) -> Code:
    """
    Generate the TOTP code for a base32 secret.

    :param secret: base32 secret as stored for the account
    :param now: reference time; defaults to the current time
    :raises DecodeError: if ``secret`` is not valid base32
    """
    decode_secret(secret)
    seconds = unix_seconds(now)
    otp = pyotp.TOTP(secret, digits=DIGITS, interval=INTERVAL)
    # counter computed here rather than via .at(), which round-trips through local time
    code = otp.generate_otp(timecode(seconds) & _COUNTER_MASK)
    return Code(code=int(code), seconds_remaining=seconds_remaining(seconds))
