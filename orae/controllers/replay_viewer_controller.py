"""Controller for navigating and playing back a single replay."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from orae.models.board_state import BoardState
from orae.models.replay_data import GameReplay
from orae.models.replay_viewer_model import ReplayViewerModel
from orae.services.board_state_cache_service import BoardStateCache, ReplayBoardData
from orae.services.logging_service import LoggingService
from orae.services.move_analysis_service import MoveAnalysisService, MoveClassification
from orae.services.move_enrichment_service import EnrichedMove, MoveEnrichmentService
from orae.services.performance_monitor import MemoryProbe, PerformanceMonitor


DEFAULT_SPEEDS = [0.25, 0.5, 0.75, 1, 1.25, 1.5, 2, 2.5, 3, 4]


@dataclass(frozen=True)
class ViewerFrame:
    """Everything shown for the current move."""
    move_index: int
    board: BoardState
    move: Optional[EnrichedMove]
    classification: Optional[MoveClassification]
    commentary: str
    is_turning_point: bool


class ReplayViewerController(QObject):
    """Controller owning one viewer session.

    The session owns its caches, its playback timer and its performance
    monitor; teardown() releases all of them.
    """

    critical_move_reached = pyqtSignal(int)  # move index where auto-play paused

    def __init__(self, config: Dict[str, Any], memory_probe: Optional[MemoryProbe] = None) -> None:
        """Initialize the replay viewer controller.

        Args:
            config: Configuration dictionary.
            memory_probe: Optional memory probe for the performance monitor.
        """
        super().__init__()
        self.config = config
        playback_config = config.get('playback', {})
        self.base_interval_ms: int = playback_config.get('base_interval_ms', 1000)
        self.speeds: List[float] = list(playback_config.get('speeds', DEFAULT_SPEEDS))
        self.pause_on_critical_moves: bool = playback_config.get('pause_on_critical_moves', True)

        self.viewer_model = ReplayViewerModel(playback_config.get('default_speed', 1))
        self.enrichment_service = MoveEnrichmentService(config)
        self.board_cache = BoardStateCache(config)
        self.move_analysis = MoveAnalysisService(config)
        self.performance_monitor = PerformanceMonitor(config, memory_probe)

        self._playback_timer = QTimer()
        self._playback_timer.timeout.connect(self._on_playback_tick)

    # Replay access

    def open_replay(self, replay: Optional[GameReplay]) -> None:
        """Show a replay from its first move.

        Args:
            replay: GameReplay to open, or None to close the current one.
        """
        self.pause()
        self.viewer_model.set_active_replay(replay)

    @property
    def replay(self) -> Optional[GameReplay]:
        return self.viewer_model.active_replay

    @property
    def current_move_index(self) -> int:
        return self.viewer_model.current_move_index

    def enriched_moves(self) -> List[EnrichedMove]:
        """Enriched moves of the active replay (cached per session)."""
        if self.replay is None:
            return []
        return self.enrichment_service.enrich(self.replay.moves)

    def board_data(self) -> Optional[ReplayBoardData]:
        """Board timeline of the active replay (cached per session)."""
        if self.replay is None:
            return None
        return self.board_cache.get_or_build(self.replay.id, self.replay.moves)

    def current_board(self) -> Optional[BoardState]:
        """Board after the current move, or None without an active replay."""
        data = self.board_data()
        if data is None:
            return None
        return data.board_after(self.current_move_index)

    def current_frame(self) -> Optional[ViewerFrame]:
        """Collect the board, move and verdict for the current move.

        The work is timed by the performance monitor.

        Returns:
            ViewerFrame, or None without an active replay.
        """
        if self.replay is None:
            return None

        self.performance_monitor.start_timing()
        index = self.current_move_index
        data = self.board_data()
        moves = self.enriched_moves()
        move = moves[index] if index < len(moves) else None

        classification = None
        commentary = ""
        if move is not None:
            classification = self.move_analysis.classify(move.move)
            if classification is not None:
                commentary = self.move_analysis.commentary(move.move, classification)

        frame = ViewerFrame(
            move_index=index,
            board=data.board_after(index),
            move=move,
            classification=classification,
            commentary=commentary,
            is_turning_point=index in data.turning_points,
        )
        self.performance_monitor.end_timing()
        return frame

    # Navigation

    def _last_index(self) -> int:
        return max(self.viewer_model.move_count - 1, 0)

    def _set_index(self, index: int) -> None:
        self.viewer_model.set_current_move_index(min(max(index, 0), self._last_index()))

    def seek(self, index: int) -> None:
        """Jump to a move, clamped into range. Stops playback."""
        self.pause()
        self._set_index(index)

    def step_forward(self) -> None:
        self.seek(self.current_move_index + 1)

    def step_backward(self) -> None:
        self.seek(self.current_move_index - 1)

    def go_to_start(self) -> None:
        self.seek(0)

    def go_to_end(self) -> None:
        self.seek(self._last_index())

    # Playback

    @property
    def is_playing(self) -> bool:
        return self.viewer_model.is_playing

    @property
    def playback_interval_ms(self) -> int:
        """Milliseconds between automatic steps at the current speed."""
        return int(self.base_interval_ms / self.viewer_model.playback_speed)

    def set_playback_speed(self, speed: float) -> None:
        """Change the playback speed.

        Args:
            speed: One of the configured speeds.

        Raises:
            ValueError: If the speed is not configured.
        """
        if speed not in self.speeds:
            raise ValueError(f"Unsupported playback speed {speed}. Supported: {self.speeds}")
        self.viewer_model.set_playback_speed(speed)
        if self._playback_timer.isActive():
            self._playback_timer.setInterval(self.playback_interval_ms)

    def play(self) -> bool:
        """Start auto-play from the current move.

        Returns:
            True if playback started (False without moves or at the last move).
        """
        if self.viewer_model.move_count == 0 or self.current_move_index >= self._last_index():
            self.pause()
            return False
        self._playback_timer.start(self.playback_interval_ms)
        self.viewer_model.set_playing(True)
        return True

    def pause(self) -> None:
        """Stop auto-play."""
        if self._playback_timer.isActive():
            self._playback_timer.stop()
        self.viewer_model.set_playing(False)

    def toggle_playback(self) -> bool:
        """Play if paused, pause if playing.

        Returns:
            True if playing afterwards.
        """
        if self.is_playing:
            self.pause()
            return False
        return self.play()

    def _on_playback_tick(self) -> None:
        """Advance one move; stop at the end or on a move that should pause."""
        if self.current_move_index >= self._last_index():
            self.pause()
            return

        self._set_index(self.current_move_index + 1)
        index = self.current_move_index

        if self.pause_on_critical_moves and self.replay is not None:
            classification = self.move_analysis.classify(self.replay.moves[index])
            if classification is not None and classification.should_pause:
                LoggingService.get_instance().debug(f"Auto-play paused on critical move {index}")
                self.pause()
                self.critical_move_reached.emit(index)
                return

        if index >= self._last_index():
            self.pause()

    # Lifecycle

    def teardown(self) -> None:
        """Stop every timer and drop every cache of this session."""
        self.pause()
        self.performance_monitor.stop_sampling()
        self.enrichment_service.clear()
        self.board_cache.clear()
        LoggingService.get_instance().debug("Replay viewer session torn down")
