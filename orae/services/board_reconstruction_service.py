"""Service for rebuilding board snapshots from a move log."""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from orae.models.board_state import BoardState, SeedPosition, disc_for
from orae.models.replay_data import MoveRecord, is_on_board
from orae.services.logging_service import LoggingService


@dataclass(frozen=True)
class BoardIndexMapping:
    """Maps move indices to indices of a board-state sequence.

    A sequence either starts with the pre-move snapshot (len(moves) + 1
    states) or with the snapshot after the first move (len(moves) states).
    """
    has_initial_state: bool
    state_count: int

    def index_of(self, move_index: int) -> int:
        """Board-state index showing the position after a given move.

        The result is clamped into the sequence bounds (0 for an empty sequence).

        Args:
            move_index: 0-based move index.

        Returns:
            Index into the board-state sequence.
        """
        index = move_index + 1 if self.has_initial_state else move_index
        return min(max(index, 0), max(self.state_count - 1, 0))


def board_index_mapping(states: Sequence[BoardState], moves: Sequence[MoveRecord]) -> BoardIndexMapping:
    """Detect whether a state sequence carries the initial snapshot.

    This length comparison is the only contract between producers and
    consumers of board-state sequences.

    Args:
        states: Board-state sequence.
        moves: Move log the sequence was built from.

    Returns:
        BoardIndexMapping for the sequence.
    """
    return BoardIndexMapping(
        has_initial_state=len(states) == len(moves) + 1,
        state_count=len(states),
    )


def seed_from_config(config: Dict[str, Any]) -> SeedPosition:
    """Read the configured board seed.

    Args:
        config: Configuration dictionary.

    Returns:
        SeedPosition from config['board']['seed'] (defaults to EMPTY).

    Raises:
        ValueError: If the configured seed name is unknown.
    """
    name = config.get('board', {}).get('seed', SeedPosition.EMPTY.value)
    try:
        return SeedPosition(name)
    except ValueError:
        known = ", ".join(seed.value for seed in SeedPosition)
        raise ValueError(f"Unknown board seed '{name}'. Known seeds: {known}") from None


class BoardReconstructionService:
    """Replays move logs against an 8x8 grid."""

    @staticmethod
    def reconstruct(moves: Sequence[MoveRecord],
                    seed: SeedPosition = SeedPosition.EMPTY,
                    include_initial_state: bool = False) -> List[BoardState]:
        """Rebuild the board after every move of a log.

        For each move the placed cell is set to the mover's color, then every
        flipped cell is recolored, then a copy of the grid is appended.

        Args:
            moves: Ordered move log with resolved flips.
            seed: Board contents before the first move.
            include_initial_state: Prepend the pre-move snapshot (N + 1 states).

        Returns:
            List of board snapshots (N, or N + 1 with the initial state).

        Raises:
            ValueError: If a move or flipped cell lies off the board.
        """
        board = BoardState.seeded(seed)
        states: List[BoardState] = [board.copy()] if include_initial_state else []

        for index, move in enumerate(moves):
            BoardReconstructionService._check_move(move, index)
            disc = disc_for(move.player)
            board.set(move.x, move.y, disc)
            for cell in move.flipped_cells:
                board.set(cell.x, cell.y, disc)
            states.append(board.copy())

        return states

    @staticmethod
    def _check_move(move: MoveRecord, index: int) -> None:
        """Fail fast on coordinates outside the board.

        Args:
            move: Move to check.
            index: Position of the move in the log.

        Raises:
            ValueError: If the move or any flipped cell is off the board.
        """
        if not is_on_board(move.x, move.y):
            message = f"Move {index} (#{move.move_number}) is off the board: ({move.x}, {move.y})"
            LoggingService.get_instance().error(message)
            raise ValueError(message)
        for cell in move.flipped_cells:
            if not is_on_board(cell.x, cell.y):
                message = (f"Move {index} (#{move.move_number}) flips a cell off the board: "
                           f"({cell.x}, {cell.y})")
                LoggingService.get_instance().error(message)
                raise ValueError(message)
