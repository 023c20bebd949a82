from __future__ import annotations

import pytest

from fleetlock import RandomnessUnavailableError, TokenGenerator
from fleetlock.domain.tokens import encode_bytes

_ALPHABET = set("0123456789abcdefghijklmnopqrstuv")


def test_encode_bytes_uses_base32_digits_per_byte():
    assert encode_bytes(b"\x00\x1f\x20\xff") == "0" + "v" + "10" + "7v"


def test_generated_token_is_printable_alphanumeric():
    token = TokenGenerator().generate()
    assert token
    assert set(token) <= _ALPHABET


def test_ten_thousand_tokens_are_unique():
    gen = TokenGenerator()
    tokens = [gen.generate() for _ in range(10_000)]
    assert len(set(tokens)) == len(tokens)


def test_source_is_asked_for_configured_byte_count():
    seen = []

    def source(n: int) -> bytes:
        seen.append(n)
        return bytes(range(n))

    assert TokenGenerator(num_bytes=4, source=source).generate() == "0123"
    assert seen == [4]


@pytest.mark.parametrize("exc", [OSError("no entropy"), NotImplementedError("no urandom")])
def test_missing_entropy_is_fatal(exc):
    def source(n: int) -> bytes:
        raise exc

    with pytest.raises(RandomnessUnavailableError) as ei:
        TokenGenerator(source=source).generate()
    assert ei.value.__cause__ is exc


def test_num_bytes_must_be_positive():
    with pytest.raises(ValueError):
        TokenGenerator(num_bytes=0)
