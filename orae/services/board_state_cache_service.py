"""Per-replay board timelines with evaluation lookups."""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from orae.models.board_state import BoardState, SeedPosition
from orae.models.replay_data import MoveRecord
from orae.services.board_reconstruction_service import (
    BoardIndexMapping, BoardReconstructionService, board_index_mapping, seed_from_config
)
from orae.services.logging_service import LoggingService
from orae.services.move_analysis_service import DEFAULT_TURNING_POINT_THRESHOLD, is_turning_point
from orae.utils.fifo_cache import FifoCache


DEFAULT_BOARD_STATE_CAPACITY = 5


@dataclass(frozen=True)
class ReplayBoardData:
    """Everything the viewer needs to scrub through one replay."""
    board_states: Tuple[BoardState, ...]  # initial snapshot plus one per move
    move_index: Dict[str, int]  # position key -> index of the move placed there
    evaluation_by_index: Dict[int, int]  # move index -> evaluation, scored moves only
    turning_points: Tuple[int, ...]  # move indices
    index_mapping: BoardIndexMapping

    def board_after(self, move_index: int) -> BoardState:
        """Board showing the position after a move (clamped)."""
        return self.board_states[self.index_mapping.index_of(move_index)]


class BoardStateCache:
    """Builds ReplayBoardData once per (replay id, move count).

    Owned by a viewer session; eviction is FIFO.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize the board-state cache.

        Args:
            config: Configuration dictionary.
        """
        self.config = config
        capacity = config.get('cache', {}).get('board_state_capacity', DEFAULT_BOARD_STATE_CAPACITY)
        self.turning_point_threshold = config.get('move_analysis', {}).get(
            'turning_point_threshold', DEFAULT_TURNING_POINT_THRESHOLD)
        self.seed: SeedPosition = seed_from_config(config)
        self._cache: FifoCache[Tuple[str, int], ReplayBoardData] = FifoCache(
            capacity, "board-state cache")

    def get_or_build(self, replay_id: str, moves: Sequence[MoveRecord]) -> ReplayBoardData:
        """Get the board data of a replay, building it on a miss.

        Args:
            replay_id: Replay identifier.
            moves: Move log of the replay.

        Returns:
            ReplayBoardData.

        Raises:
            ValueError: If reconstruction fails. Nothing is cached in that case.
        """
        return self._cache.get_or_create((replay_id, len(moves)), lambda: self._build(replay_id, moves))

    def _build(self, replay_id: str, moves: Sequence[MoveRecord]) -> ReplayBoardData:
        states = BoardReconstructionService.reconstruct(moves, self.seed, include_initial_state=True)

        move_index: Dict[str, int] = {}
        evaluation_by_index: Dict[int, int] = {}
        turning_points: List[int] = []
        for index, move in enumerate(moves):
            move_index[move.position_key] = index
            if move.evaluation_score is not None:
                evaluation_by_index[index] = move.evaluation_score
            if index > 0 and is_turning_point(moves[index - 1].evaluation_score,
                                              move.evaluation_score,
                                              self.turning_point_threshold):
                turning_points.append(index)

        LoggingService.get_instance().debug(
            f"Built board data for replay {replay_id}: {len(states)} states, "
            f"{len(turning_points)} turning points")
        return ReplayBoardData(
            board_states=tuple(states),
            move_index=move_index,
            evaluation_by_index=evaluation_by_index,
            turning_points=tuple(turning_points),
            index_mapping=board_index_mapping(states, moves),
        )

    def clear(self) -> None:
        """Drop every cached timeline."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def cached_keys(self) -> List[Tuple[str, int]]:
        """Cached (replay id, move count) keys, oldest first."""
        return self._cache.keys()
