"""Wallet address validation and chain detection."""
from __future__ import annotations

import re

_ETH_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")
# base58 alphabet (no 0, O, I, l)
_SOL_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")

SUPPORTED_CHAINS = ("ethereum", "solana")


def detect_chain(address: str) -> str | None:
    """Return ``"ethereum"``, ``"solana"`` or None for an unrecognised address."""
    if _ETH_ADDRESS_RE.match(address):
        return "ethereum"
    if _SOL_ADDRESS_RE.match(address):
        return "solana"
    return None


def validate_address(address: str) -> str:
    """Strip and validate a wallet address, returning the cleaned value."""
    cleaned = (address or "").strip()
    if not cleaned:
        raise ValueError("Please enter a wallet address")
    if detect_chain(cleaned) is None:
        raise ValueError(
            f"Invalid wallet address '{cleaned}'. "
            "Please enter a valid Ethereum or Solana address."
        )
    return cleaned


def shorten(address: str) -> str:
    """Shorten an address for display, e.g. ``0x12345678...abcdef``."""
    if len(address) > 16:
        return f"{address[:10]}...{address[-6:]}"
    return address
