from __future__ import annotations

import re

from lp_positions.domain.exceptions import InvalidAddressError


_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def parse_address(address: str, *, field_name: str = "address") -> int:
    if not isinstance(address, str):
        raise InvalidAddressError(f"{field_name} must be a string.")
    raw = address.strip()
    if not _ADDRESS_RE.match(raw):
        raise InvalidAddressError(f"{field_name} must be a 0x-prefixed 20-byte hex address.")
    return int(raw, 16)


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    value_a = parse_address(token_a, field_name="token_a")
    value_b = parse_address(token_b, field_name="token_b")
    if value_a == value_b:
        raise InvalidAddressError("token addresses must be different.")
    return (token_a, token_b) if value_a < value_b else (token_b, token_a)


def base_is_token0(base_token_address: str, quote_token_address: str) -> bool:
    base = parse_address(base_token_address, field_name="base_token_address")
    quote = parse_address(quote_token_address, field_name="quote_token_address")
    if base == quote:
        raise InvalidAddressError("base and quote token addresses must be different.")
    return base < quote


