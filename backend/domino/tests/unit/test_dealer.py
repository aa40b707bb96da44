"""
Unit tests for dealing hands and the boneyard.
"""

import random

import pytest

from domino.logic.dealer import deal
from domino.logic.rng import create_deal_rng, shuffle_tiles
from domino.logic.tiles import create_tile_set

SEED = "cd" * 32


class TestDeal:
    def test_four_players_get_seven_tiles_and_empty_boneyard(self):
        result = deal(create_tile_set(), 4, create_deal_rng(SEED))
        assert [len(h) for h in result.hands] == [7, 7, 7, 7]
        assert result.boneyard == ()

    def test_hands_and_boneyard_partition_the_set(self):
        tiles = create_tile_set()
        result = deal(tiles, 3, create_deal_rng(SEED))
        dealt = [t.id for h in result.hands for t in h] + [t.id for t in result.boneyard]
        assert len(result.boneyard) == 7
        assert sorted(dealt) == sorted(t.id for t in tiles)
        assert len(set(dealt)) == len(dealt)

    def test_hands_are_consecutive_slices_of_the_shuffle(self):
        tiles = create_tile_set()
        result = deal(tiles, 2, random.Random(3), hand_size=5)  # noqa: S311
        shuffled = shuffle_tiles(tiles, random.Random(3))  # noqa: S311
        assert list(result.hands[0]) == shuffled[0:5]
        assert list(result.hands[1]) == shuffled[5:10]
        assert list(result.boneyard) == shuffled[10:]

    def test_same_seed_same_deal(self):
        first = deal(create_tile_set(), 4, create_deal_rng(SEED))
        second = deal(create_tile_set(), 4, create_deal_rng(SEED))
        assert first == second

    def test_too_many_tiles_requested(self):
        with pytest.raises(ValueError, match="cannot deal"):
            deal(create_tile_set(), 4, random.Random(0), hand_size=8)  # noqa: S311

    def test_rejects_non_positive_counts(self):
        with pytest.raises(ValueError, match="player_count"):
            deal(create_tile_set(), 0, random.Random(0))  # noqa: S311
        with pytest.raises(ValueError, match="hand_size"):
            deal(create_tile_set(), 2, random.Random(0), hand_size=0)  # noqa: S311
