"""Tests for replay statistics."""

from orae.models.replay_data import GameMode, Winner
from orae.services.replay_statistics_service import ReplayStatisticsService

from helpers import DAY_MS, NOW_MS, make_replay, scored_moves


def test_empty_input_is_zero_filled(config):
    statistics = ReplayStatisticsService(config).calculate_statistics([], now_ms=NOW_MS)

    assert statistics.total_games == 0
    assert statistics.win_rate == 0
    assert statistics.average_game_duration == 0
    assert statistics.average_moves_per_game == 0
    assert set(statistics.performance_by_mode) == set(GameMode)
    assert all(perf.games == 0 and perf.win_rate == 0 for perf in statistics.performance_by_mode.values())
    assert sorted(statistics.recent_trends) == [7, 30, 90]
    assert all(bucket.games == 0 and bucket.win_rate == 0 for bucket in statistics.recent_trends.values())
    assert statistics.favorite_openings == []
    assert statistics.strongest_opponents == []


def test_win_rate_uses_tracked_side(config):
    replays = [
        make_replay("a", tracked_black=True, winner=Winner.BLACK),
        make_replay("b", tracked_black=False, winner=Winner.WHITE),
        make_replay("c", tracked_black=False, winner=Winner.BLACK),
        make_replay("d", tracked_black=True, winner=Winner.DRAW),
    ]
    statistics = ReplayStatisticsService(config).calculate_statistics(replays, now_ms=NOW_MS)

    assert statistics.total_games == 4
    assert statistics.win_rate == 50.0


def test_averages_are_rounded(config):
    replays = [
        make_replay("a", duration=100, moves=scored_moves([None] * 3)),
        make_replay("b", duration=201, moves=scored_moves([None] * 4)),
    ]
    statistics = ReplayStatisticsService(config).calculate_statistics(replays, now_ms=NOW_MS)

    assert statistics.average_game_duration == 151
    assert statistics.average_moves_per_game == 4


def test_performance_by_mode(config):
    replays = [
        make_replay("a", mode=GameMode.TOWER, winner=Winner.BLACK, tracked_rating=1400),
        make_replay("b", mode=GameMode.TOWER, winner=Winner.WHITE, tracked_rating=1600),
        make_replay("c", mode=GameMode.AI, winner=Winner.BLACK, tracked_rating=None),
    ]
    performance = ReplayStatisticsService(config).calculate_statistics(replays, now_ms=NOW_MS).performance_by_mode

    assert performance[GameMode.TOWER].games == 2
    assert performance[GameMode.TOWER].win_rate == 50.0
    assert performance[GameMode.TOWER].average_rating == 1500
    assert performance[GameMode.AI].average_rating is None
    assert performance[GameMode.BATTLE].games == 0
    assert performance[GameMode.CASUAL].win_rate == 0


def test_recent_windows_are_nested(config):
    ages_days = [0, 3, 7, 8, 29, 30, 31, 60, 90, 91, 400]
    replays = [make_replay(f"r{age}", start_time=NOW_MS - age * DAY_MS) for age in ages_days]
    statistics = ReplayStatisticsService(config).calculate_statistics(replays, now_ms=NOW_MS)

    assert statistics.last_7_days.games == 3
    assert statistics.last_30_days.games == 6
    assert statistics.last_90_days.games == 9
    assert statistics.last_7_days.games <= statistics.last_30_days.games <= statistics.last_90_days.games


def test_favorite_openings_and_strongest_opponents(config):
    replays = [
        make_replay("a", opening="Corner Rush", opponent="Edge", winner=Winner.BLACK),
        make_replay("b", opening="Corner Rush", opponent="Edge", winner=Winner.WHITE),
        make_replay("c", opening="Diagonal", opponent="Star", winner=Winner.WHITE),
        make_replay("d", opponent="Star", winner=Winner.WHITE),
        make_replay("e", opponent="Nova", winner=Winner.BLACK),
        make_replay("f", opponent="Comet", winner=Winner.WHITE),
    ]
    statistics = ReplayStatisticsService(config).calculate_statistics(replays, now_ms=NOW_MS)

    assert [(o.name, o.count, o.win_rate) for o in statistics.favorite_openings] == [
        ("Corner Rush", 2, 50.0), ("Diagonal", 1, 0.0)]
    assert [(o.name, o.games_played, o.win_rate) for o in statistics.strongest_opponents] == [
        ("Star", 2, 0.0), ("Comet", 1, 0.0), ("Edge", 2, 50.0)]
