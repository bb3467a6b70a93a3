"""Replay viewer state model."""

from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from orae.models.replay_data import GameReplay
from orae.services.logging_service import LoggingService


class ReplayViewerModel(QObject):
    """Model representing the replay open in the viewer.

    This model holds the active replay, the current move index and the
    playback state, and emits signals when that state changes.
    """

    active_replay_changed = pyqtSignal(object)  # Emitted with the GameReplay or None
    current_move_changed = pyqtSignal(int)  # Emitted with the 0-based move index
    playing_changed = pyqtSignal(bool)
    playback_speed_changed = pyqtSignal(float)

    def __init__(self, default_speed: float = 1.0) -> None:
        """Initialize the replay viewer model.

        Args:
            default_speed: Initial playback speed multiplier.
        """
        super().__init__()
        self._active_replay: Optional[GameReplay] = None
        self._current_move_index: int = 0
        self._is_playing: bool = False
        self._playback_speed: float = default_speed

    @property
    def active_replay(self) -> Optional[GameReplay]:
        return self._active_replay

    def set_active_replay(self, replay: Optional[GameReplay]) -> None:
        """Set the active replay and rewind to its first move.

        Args:
            replay: GameReplay to show, or None to close the viewer.
        """
        LoggingService.get_instance().debug(
            f"Active replay changed: {self._active_replay.id if self._active_replay else 'None'} -> "
            f"{replay.id if replay else 'None'}")

        self._active_replay = replay
        self._current_move_index = 0
        self.active_replay_changed.emit(replay)
        self.current_move_changed.emit(0)

    @property
    def move_count(self) -> int:
        return len(self._active_replay.moves) if self._active_replay else 0

    @property
    def current_move_index(self) -> int:
        return self._current_move_index

    def set_current_move_index(self, index: int) -> None:
        """Set the current move index.

        Args:
            index: 0-based move index, already clamped by the caller.
        """
        if self._current_move_index != index:
            self._current_move_index = index
            self.current_move_changed.emit(index)

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    def set_playing(self, playing: bool) -> None:
        if self._is_playing != playing:
            self._is_playing = playing
            self.playing_changed.emit(playing)

    @property
    def playback_speed(self) -> float:
        return self._playback_speed

    def set_playback_speed(self, speed: float) -> None:
        if self._playback_speed != speed:
            self._playback_speed = speed
            self.playback_speed_changed.emit(float(speed))
