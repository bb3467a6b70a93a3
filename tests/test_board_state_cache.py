"""Tests for the per-replay board-state cache."""

import pytest

from orae.models.board_state import BLACK_DISC
from orae.services.board_state_cache_service import BoardStateCache

from helpers import make_move, scenario_moves, scored_moves


def test_builds_timeline_with_initial_state(config):
    data = BoardStateCache(config).get_or_build("r1", scenario_moves())

    assert len(data.board_states) == 4
    assert data.index_mapping.has_initial_state
    assert data.board_states[0].occupied_count() == 0
    assert data.board_after(0).occupied_count() == 1
    assert data.board_after(2).get(2, 2) == BLACK_DISC
    assert data.move_index == {"1,3": 0, "2,2": 1, "2,1": 2}


def test_evaluation_lookup_skips_unscored_moves(config):
    data = BoardStateCache(config).get_or_build("r1", scored_moves([None, 5, None, -3]))

    assert data.evaluation_by_index == {1: 5, 3: -3}


def test_turning_point_boundary(config):
    cache = BoardStateCache(config)

    exactly_twenty = cache.get_or_build("a", scored_moves([0, 20]))
    twenty_one = cache.get_or_build("b", scored_moves([0, 21]))
    downward = cache.get_or_build("c", scored_moves([10, -11]))

    assert exactly_twenty.turning_points == ()
    assert twenty_one.turning_points == (1,)
    assert downward.turning_points == (1,)


def test_turning_points_need_both_scores(config):
    data = BoardStateCache(config).get_or_build("r1", scored_moves([0, None, 50, 0]))

    assert data.turning_points == (3,)


def test_cached_per_replay_and_length(config):
    cache = BoardStateCache(config)
    moves = scenario_moves()

    first = cache.get_or_build("r1", moves)
    assert cache.get_or_build("r1", moves) is first
    assert cache.get_or_build("r1", moves[:2]) is not first
    assert cache.get_or_build("r2", moves) is not first
    assert len(cache) == 3


def test_fifo_eviction_at_capacity_five(config):
    cache = BoardStateCache(config)
    for i in range(6):
        cache.get_or_build(f"r{i}", scenario_moves())

    assert len(cache) == 5
    assert ("r0", 3) not in cache.cached_keys()
    assert cache.cached_keys()[0] == ("r1", 3)


def test_reconstruction_error_is_not_cached(config):
    cache = BoardStateCache(config)

    with pytest.raises(ValueError):
        cache.get_or_build("bad", [make_move(9, 9)])
    assert len(cache) == 0


def test_clear(config):
    cache = BoardStateCache(config)
    cache.get_or_build("r1", scenario_moves())
    cache.clear()
    assert len(cache) == 0
