"""Tests for the replay viewer controller."""

import pytest

from orae.controllers.replay_viewer_controller import ReplayViewerController
from orae.models.replay_data import Player
from orae.models.replay_viewer_model import ReplayViewerModel

from helpers import make_replay, scenario_moves, scored_moves


def no_memory():
    return None


@pytest.fixture
def controller(config):
    controller = ReplayViewerController(config, memory_probe=no_memory)
    yield controller
    controller.teardown()


def test_open_replay_starts_at_first_move(controller):
    controller.open_replay(make_replay(moves=scenario_moves()))

    assert controller.current_move_index == 0
    assert controller.current_board().count(Player.BLACK) == 1
    assert not controller.is_playing


def test_seek_is_clamped(controller):
    controller.open_replay(make_replay(moves=scenario_moves()))

    controller.seek(99)
    assert controller.current_move_index == 2
    controller.seek(-5)
    assert controller.current_move_index == 0


def test_step_and_jump(controller):
    controller.open_replay(make_replay(moves=scenario_moves()))

    controller.step_forward()
    board = controller.current_board()
    assert board.count(Player.WHITE) == 2
    assert board.count(Player.BLACK) == 0

    controller.go_to_end()
    assert controller.current_move_index == 2
    controller.step_backward()
    assert controller.current_move_index == 1
    controller.go_to_start()
    assert controller.current_move_index == 0


def test_no_active_replay(controller):
    assert controller.current_board() is None
    assert controller.current_frame() is None
    assert controller.enriched_moves() == []
    assert not controller.play()


def test_current_frame(controller):
    controller.open_replay(make_replay(moves=scored_moves([10, 20, -40, 5])))
    controller.seek(2)

    frame = controller.current_frame()

    assert frame.move_index == 2
    assert frame.move.index == 2
    assert frame.classification.should_pause
    assert frame.commentary.startswith("Black played C1")
    assert frame.is_turning_point
    assert len(controller.performance_monitor.samples) == 1


def test_play_at_last_move_does_nothing(controller):
    controller.open_replay(make_replay(moves=scenario_moves()))
    controller.go_to_end()

    assert not controller.play()
    assert not controller.is_playing


def test_play_and_pause(controller):
    controller.open_replay(make_replay(moves=scenario_moves()))

    assert controller.play()
    assert controller.is_playing
    assert not controller.toggle_playback()
    assert not controller.is_playing


def test_playback_speed(controller):
    controller.set_playback_speed(2)
    assert controller.playback_interval_ms == 500

    controller.set_playback_speed(0.25)
    assert controller.playback_interval_ms == 4000

    with pytest.raises(ValueError):
        controller.set_playback_speed(7)


def test_playback_pauses_on_blunder(controller):
    controller.open_replay(make_replay(moves=scored_moves([10, 20, -40, 5])))
    reached = []
    controller.critical_move_reached.connect(reached.append)
    controller.play()

    controller._on_playback_tick()
    assert controller.is_playing
    controller._on_playback_tick()

    assert controller.current_move_index == 2
    assert not controller.is_playing
    assert reached == [2]


def test_playback_stops_at_last_move(controller):
    controller.open_replay(make_replay(moves=scenario_moves()))
    controller.play()

    controller._on_playback_tick()
    controller._on_playback_tick()

    assert controller.current_move_index == 2
    assert not controller.is_playing


def test_teardown_releases_session(config):
    controller = ReplayViewerController(config, memory_probe=no_memory)
    controller.open_replay(make_replay(moves=scenario_moves()))
    controller.current_frame()
    controller.performance_monitor.start_sampling()

    controller.teardown()

    assert len(controller.enrichment_service) == 0
    assert len(controller.board_cache) == 0
    assert not controller.performance_monitor.is_sampling


def test_viewer_model_rewinds_when_the_replay_changes():
    model = ReplayViewerModel()
    replays = []
    model.active_replay_changed.connect(replays.append)

    model.set_active_replay(make_replay(replay_id="first", moves=scenario_moves()))
    model.set_current_move_index(2)
    model.set_active_replay(make_replay(replay_id="second", moves=scenario_moves()))

    assert [replay.id for replay in replays] == ["first", "second"]
    assert model.current_move_index == 0

    model.set_active_replay(None)
    assert model.move_count == 0
