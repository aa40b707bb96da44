"""
Unit tests for seeded tile shuffling.
"""

import random

import pytest

from domino.logic.rng import SEED_BYTES, create_deal_rng, generate_seed, shuffle_tiles, validate_seed_hex
from domino.logic.tiles import create_tile_set

SEED = "ab" * SEED_BYTES


class TestValidateSeedHex:
    def test_accepts_generated_seed(self):
        validate_seed_hex(generate_seed())

    def test_rejects_wrong_length(self):
        with pytest.raises(ValueError, match="exactly 64"):
            validate_seed_hex("ab")

    def test_rejects_non_hex(self):
        with pytest.raises(ValueError, match="invalid hex"):
            validate_seed_hex("zz" * SEED_BYTES)

    def test_rejects_non_string(self):
        with pytest.raises(TypeError):
            validate_seed_hex(123)  # type: ignore[arg-type]


class TestGenerateSeed:
    def test_seed_is_64_hex_chars(self):
        seed = generate_seed()
        assert len(seed) == 64
        bytes.fromhex(seed)

    def test_seeds_differ(self):
        assert generate_seed() != generate_seed()


class TestShuffleTiles:
    def test_same_seed_same_order(self):
        tiles = create_tile_set()
        first = shuffle_tiles(tiles, create_deal_rng(SEED))
        second = shuffle_tiles(tiles, create_deal_rng(SEED))
        assert first == second

    def test_different_deal_numbers_differ(self):
        tiles = create_tile_set()
        first = shuffle_tiles(tiles, create_deal_rng(SEED, 0))
        second = shuffle_tiles(tiles, create_deal_rng(SEED, 1))
        assert first != second

    def test_shuffle_is_a_permutation(self):
        tiles = create_tile_set()
        shuffled = shuffle_tiles(tiles, create_deal_rng(SEED))
        assert sorted(t.id for t in shuffled) == sorted(t.id for t in tiles)
        assert len(shuffled) == len(tiles)

    def test_input_not_modified(self):
        items = [1, 2, 3, 4, 5]
        shuffle_tiles(items, random.Random(7))  # noqa: S311
        assert items == [1, 2, 3, 4, 5]

    def test_backward_fisher_yates_swaps(self):
        """Each step i swaps position i with randint(0, i), last index first."""
        items = list(range(6))
        rng = random.Random(42)  # noqa: S311
        mirror = random.Random(42)  # noqa: S311
        expected = list(items)
        for i in range(len(expected) - 1, 0, -1):
            j = mirror.randint(0, i)
            expected[i], expected[j] = expected[j], expected[i]
        assert shuffle_tiles(items, rng) == expected

    def test_empty_and_single(self):
        rng = random.Random(1)  # noqa: S311
        assert shuffle_tiles([], rng) == []
        assert shuffle_tiles(["a"], rng) == ["a"]

    def test_rejects_out_of_range_deal_number(self):
        with pytest.raises(ValueError, match="deal_number"):
            create_deal_rng(SEED, -1)

    def test_without_seed_returns_rng(self):
        assert isinstance(create_deal_rng(None), random.Random)
