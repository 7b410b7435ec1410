"""Tests for signature parsing and recovery id normalization."""

from __future__ import annotations

import pytest

from oyster_chat.core.signature import (
    InvalidSignatureFormatError,
    RawSignature,
    SignatureError,
    normalize_recovery_id,
    parse_signature,
)

R_HEX = "11" * 32
S_HEX = "22" * 32


@pytest.mark.parametrize(
    ("v", "expected"),
    [(27, 0), (28, 1), (0, 0), (1, 1)],
)
def test_normalize_recovery_id(v: int, expected: int) -> None:
    assert normalize_recovery_id(v) == expected


@pytest.mark.parametrize("v", [2, 3, 26, 29, 35, 255])
def test_normalize_recovery_id_rejects_unknown_values(v: int) -> None:
    with pytest.raises(InvalidSignatureFormatError, match="Unsupported recovery byte"):
        normalize_recovery_id(v)


def test_parse_splits_components() -> None:
    parsed = parse_signature(R_HEX + S_HEX + "1c")
    assert parsed == RawSignature(r=bytes.fromhex(R_HEX), s=bytes.fromhex(S_HEX), recovery_id=1)
    assert parsed.to_bytes() == bytes.fromhex(R_HEX + S_HEX + "01")


@pytest.mark.parametrize("prefix", ["0x", "0X"])
def test_parse_accepts_hex_prefix(prefix: str) -> None:
    parsed = parse_signature(prefix + R_HEX + S_HEX + "1b")
    assert parsed.recovery_id == 0


def test_parse_accepts_uppercase_hex() -> None:
    parsed = parse_signature((R_HEX + S_HEX).upper() + "00")
    assert parsed.r == bytes.fromhex(R_HEX)


@pytest.mark.parametrize("length", [0, 64, 66, 130])
def test_parse_rejects_wrong_length(length: int) -> None:
    with pytest.raises(InvalidSignatureFormatError, match="must be 65 bytes"):
        parse_signature("00" * length)


@pytest.mark.parametrize(
    "value",
    ["zz" * 65, R_HEX + S_HEX + "0", "0x" + "g1" * 65, "é" * 130],
)
def test_parse_rejects_invalid_hex(value: str) -> None:
    with pytest.raises(InvalidSignatureFormatError, match="Invalid hex encoding"):
        parse_signature(value)


def test_parse_rejects_unknown_recovery_byte() -> None:
    with pytest.raises(InvalidSignatureFormatError):
        parse_signature(R_HEX + S_HEX + "02")


def test_format_errors_are_signature_errors() -> None:
    """Callers can catch every signature problem through one base class."""
    assert issubclass(InvalidSignatureFormatError, SignatureError)
    assert issubclass(SignatureError, ValueError)
