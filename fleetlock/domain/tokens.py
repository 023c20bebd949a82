"""Lock token generation.

A token identifies one acquisition of one resource. It is what makes release
safe: the unlock script only deletes the key when the stored value equals the
caller's token, so a holder whose lock already expired cannot delete the lock
of whoever took the resource after it.
"""

from __future__ import annotations

import secrets
from typing import Callable

from .errors import RandomnessUnavailableError

_DIGITS = "0123456789abcdefghijklmnopqrstuv"


def _to_base32(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 32)
        out.append(_DIGITS[r])
    return "".join(reversed(out))


def encode_bytes(raw: bytes) -> str:
    """Concatenate the base-32 digits of every byte (no padding)."""
    return "".join(_to_base32(b) for b in raw)


class TokenGenerator:
    def __init__(self, num_bytes: int = 16, source: Callable[[int], bytes] = secrets.token_bytes):
        if num_bytes <= 0:
            raise ValueError("num_bytes must be > 0")
        self.num_bytes = int(num_bytes)
        self._source = source

    def generate(self) -> str:
        try:
            raw = self._source(self.num_bytes)
        except (OSError, NotImplementedError) as exc:
            raise RandomnessUnavailableError(f"secure random source unavailable: {exc}") from exc
        return encode_bytes(raw)
