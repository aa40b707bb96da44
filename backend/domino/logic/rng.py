"""
Random number generation for tile shuffling.

1. Generate a cryptographic seed (32 bytes / 256 bits) via secrets module
2. Derive a per-deal stdlib RNG via SHA512 with domain separation (versioned prefix)
3. Apply a backward Fisher-Yates shuffle (i from n-1 down to 1, j uniform in [0, i])

28! is about 2^101, so 256 bits of seed comfortably cover every deal.
The seed is stored with the game so any deal can be reproduced.
"""

import hashlib
import random
import secrets
from typing import TypeVar

SEED_BYTES = 32
RNG_VERSION = "sha512-mt-v1"  # Stored with the game for replay compatibility detection
_DEAL_DOMAIN_PREFIX = b"domino-deal-v1:"

T = TypeVar("T")


def validate_seed_hex(seed_hex: str) -> None:
    """Validate that a seed string is the correct hex format.

    Enforces exact length (64 hex chars = 32 bytes) and valid hex characters.
    Raises TypeError for non-string input, ValueError for invalid format.
    """
    if not isinstance(seed_hex, str):
        raise TypeError(f"Seed must be a string, got {type(seed_hex).__name__}")
    expected_length = SEED_BYTES * 2
    if len(seed_hex) != expected_length:
        raise ValueError(f"Seed must be exactly {expected_length} hex characters, got {len(seed_hex)}")
    try:
        bytes.fromhex(seed_hex)
    except ValueError:
        raise ValueError("Seed contains invalid hex characters") from None


def generate_seed() -> str:
    """Generate a cryptographic seed as a hex string (64 chars / 256 bits)."""
    return secrets.token_bytes(SEED_BYTES).hex()


def create_deal_rng(seed_hex: str | None, deal_number: int = 0) -> random.Random:
    """
    Derive the RNG used to shuffle the tile set for one deal.

    SHA512(_DEAL_DOMAIN_PREFIX + seed_bytes + deal_number_bytes) seeds a
    stdlib random.Random. Without a seed an OS-seeded RNG is returned.
    """
    if seed_hex is None:
        return random.Random()  # noqa: S311
    if not (0 <= deal_number < 2**32):
        raise ValueError("deal_number must be in [0, 2^32)")
    validate_seed_hex(seed_hex)
    data = bytes.fromhex(seed_hex) + deal_number.to_bytes(4, byteorder="little")
    derived = hashlib.sha512(_DEAL_DOMAIN_PREFIX + data).digest()
    return random.Random(int.from_bytes(derived, byteorder="little"))  # noqa: S311


def shuffle_tiles(items: list[T] | tuple[T, ...], rng: random.Random) -> list[T]:
    """
    Return a shuffled copy of ``items`` using a backward Fisher-Yates pass.

    For i in n-1..1: swap items[i] with items[randint(0, i)].
    """
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result
