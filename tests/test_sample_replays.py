"""Tests for generated sample replays."""

from orae.models.board_state import BLACK_DISC, WHITE_DISC, BoardState
from orae.models.replay_data import Player
from orae.services.board_reconstruction_service import BoardReconstructionService
from orae.services.sample_replay_service import SampleReplayService, flips_for

from helpers import NOW_MS, TRACKED


def test_generation_is_deterministic(config):
    first = SampleReplayService(config).generate(8, seed=3, now_ms=NOW_MS)
    second = SampleReplayService(config).generate(8, seed=3, now_ms=NOW_MS)

    assert first == second
    assert [replay.id for replay in first] == [f"sample-{i:04d}" for i in range(1, 9)]


def test_replays_are_newest_first(config):
    replays = SampleReplayService(config).generate(12, seed=1, now_ms=NOW_MS)
    starts = [replay.game_info.start_time for replay in replays]

    assert starts == sorted(starts, reverse=True)
    assert all(start < NOW_MS for start in starts)


def test_reconstruction_agrees_with_final_score(config):
    for replay in SampleReplayService(config).generate(10, seed=11, now_ms=NOW_MS):
        final = BoardReconstructionService.reconstruct(replay.moves)[-1]

        assert final.count(Player.BLACK) == replay.result.final_score.black
        assert final.count(Player.WHITE) == replay.result.final_score.white
        assert replay.game_info.total_moves == len(replay.moves)
        assert replay.game_info.start_time < replay.game_info.end_time


def test_every_game_includes_the_tracked_player(config):
    for replay in SampleReplayService(config).generate(10, seed=5, now_ms=NOW_MS):
        assert TRACKED in (replay.player_black.name, replay.player_white.name)
        assert replay.analysis is not None
        assert replay.analysis.opening_name


def test_flips_for_brackets_lines():
    board = BoardState()
    board.set(1, 0, WHITE_DISC)
    board.set(2, 0, BLACK_DISC)
    board.set(0, 1, WHITE_DISC)

    flips = flips_for(board, 0, 0, Player.BLACK)

    assert [(cell.x, cell.y) for cell in flips] == [(1, 0)]
