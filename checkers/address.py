"""Bech32 account addresses and lookup of simulated accounts."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

ACCOUNT_PREFIX = "cosmos"
MAX_ADDRESS_LENGTH = 255
_DECODE_LIMIT = 1023

ALICE = "cosmos1jmjfq0tplp9tmx4v9uemw72y4d2wa5nr3xn9d3"
BOB = "cosmos1xyxs3skf3f4jfqeuv89yyaqvjc6lffavxqhc8g"
CAROL = "cosmos1e0w5t53nrq7p66fye6c8p0ynyhf6y24l4yuxd7"

_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_CHARSET_INDEX = {char: value for value, char in enumerate(_CHARSET)}
_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)


class Bech32Error(ValueError):
    """Raised for an address that is not valid bech32 or has the wrong form."""


def _polymod(values: Iterable[int]) -> int:
    checksum = 1
    for value in values:
        top = checksum >> 25
        checksum = ((checksum & 0x1FFFFFF) << 5) ^ value
        for i, gen in enumerate(_GENERATOR):
            if (top >> i) & 1:
                checksum ^= gen
    return checksum


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _checksum(hrp: str, data: list[int]) -> list[int]:
    mod = _polymod(_hrp_expand(hrp) + data + [0] * 6) ^ 1
    return [(mod >> (5 * (5 - i))) & 31 for i in range(6)]


def _convert_bits(data: Iterable[int], from_bits: int, to_bits: int, pad: bool) -> list[int]:
    acc = 0
    bits = 0
    out: list[int] = []
    max_value = (1 << to_bits) - 1
    for value in data:
        acc = (acc << from_bits) | value
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            out.append((acc >> bits) & max_value)
    if pad:
        if bits:
            out.append((acc << (to_bits - bits)) & max_value)
    elif bits >= from_bits or (acc << (to_bits - bits)) & max_value:
        raise Bech32Error("invalid incomplete group")
    return out


def _decode(text: str) -> tuple[str, list[int]]:
    if len(text) < 8 or len(text) > _DECODE_LIMIT:
        raise Bech32Error(f"invalid bech32 string length {len(text)}")
    for char in text:
        if not 33 <= ord(char) <= 126:
            raise Bech32Error(f"invalid character in string: '{char}'")
    lower = text.lower()
    if text != lower and text != text.upper():
        raise Bech32Error("string not all lowercase or all uppercase")
    separator = lower.rfind("1")
    if separator < 1 or separator + 7 > len(lower):
        raise Bech32Error(f"invalid separator index {separator}")
    hrp, encoded = lower[:separator], lower[separator + 1:]
    values = []
    for char in encoded:
        value = _CHARSET_INDEX.get(char)
        if value is None:
            raise Bech32Error(f"invalid character not part of charset: {ord(char)}")
        values.append(value)
    payload = values[:-6]
    if _polymod(_hrp_expand(hrp) + values) != 1:
        expected = "".join(_CHARSET[v] for v in _checksum(hrp, payload))
        raise Bech32Error(f"invalid checksum (expected {expected} got {encoded[-6:]})")
    return hrp, payload


def bech32_decode(text: str) -> tuple[str, bytes]:
    """Decode a bech32 string into its human-readable part and its bytes."""
    try:
        hrp, payload = _decode(text)
        return hrp, bytes(_convert_bits(payload, 5, 8, False))
    except Bech32Error as err:
        raise Bech32Error(f"decoding bech32 failed: {err}") from err


def bech32_encode(hrp: str, data: bytes) -> str:
    """Encode bytes as a bech32 string with the given human-readable part."""
    hrp = hrp.lower()
    values = _convert_bits(data, 8, 5, True)
    return hrp + "1" + "".join(_CHARSET[v] for v in values + _checksum(hrp, values))


def acc_address_from_bech32(address: str, prefix: str = ACCOUNT_PREFIX) -> bytes:
    """Return the raw bytes of an account address, checking its prefix and length."""
    if not address.strip():
        raise Bech32Error("empty address string is not allowed")
    hrp, data = bech32_decode(address)
    if hrp != prefix:
        raise Bech32Error(f"invalid Bech32 prefix; expected {prefix}, got {hrp}")
    if not data:
        raise Bech32Error("addresses cannot be empty: unknown address")
    if len(data) > MAX_ADDRESS_LENGTH:
        raise Bech32Error(
            f"address max length is {MAX_ADDRESS_LENGTH}, got {len(data)}: unknown address"
        )
    return data


def acc_address_to_bech32(address: bytes, prefix: str = ACCOUNT_PREFIX) -> str:
    """Return the bech32 text of raw address bytes; empty bytes give an empty string."""
    if not address:
        return ""
    return bech32_encode(prefix, address)


@dataclass(frozen=True)
class Account:
    """A simulated account, known by its raw address."""

    address: bytes

    def __str__(self) -> str:
        return acc_address_to_bech32(self.address)


def find_account(accounts: Iterable[Account], address: str) -> Account | None:
    """Return the account with the given bech32 address, or None if absent."""
    wanted = acc_address_from_bech32(address)
    return next((account for account in accounts if account.address == wanted), None)