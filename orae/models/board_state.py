"""Othello board snapshot."""

from enum import Enum
from typing import List, Optional, Tuple

from orae.models.replay_data import BOARD_SIZE, Player, is_on_board


EMPTY = 0
BLACK_DISC = 1
WHITE_DISC = -1


def disc_for(player: Player) -> int:
    """Cell value used for a player's disc."""
    return BLACK_DISC if player is Player.BLACK else WHITE_DISC


class SeedPosition(Enum):
    """Board contents before the first move of a log."""
    EMPTY = "empty"
    STANDARD = "standard"  # four center discs: d4/e5 white, e4/d5 black


class BoardState:
    """An 8x8 grid of tri-state cells (EMPTY, BLACK_DISC, WHITE_DISC).

    Cells are addressed as (x, y) with x the column and y the row.
    """

    def __init__(self, cells: Optional[List[List[int]]] = None) -> None:
        """Initialize the board.

        Args:
            cells: Optional row-major grid to copy. Defaults to an empty board.
        """
        if cells is None:
            self._cells = [[EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        else:
            self._cells = [list(row) for row in cells]

    @classmethod
    def seeded(cls, seed: SeedPosition = SeedPosition.EMPTY) -> "BoardState":
        """Create the board a move log starts from.

        Args:
            seed: EMPTY for a blank board, STANDARD for the four center discs.

        Returns:
            New BoardState.
        """
        board = cls()
        if seed is SeedPosition.STANDARD:
            board.set(3, 3, WHITE_DISC)
            board.set(4, 4, WHITE_DISC)
            board.set(4, 3, BLACK_DISC)
            board.set(3, 4, BLACK_DISC)
        return board

    def get(self, x: int, y: int) -> int:
        """Get a cell value.

        Raises:
            ValueError: If the coordinates are off the board.
        """
        if not is_on_board(x, y):
            raise ValueError(f"Cell ({x}, {y}) is outside the {BOARD_SIZE}x{BOARD_SIZE} board")
        return self._cells[y][x]

    def set(self, x: int, y: int, value: int) -> None:
        """Set a cell value.

        Raises:
            ValueError: If the coordinates are off the board.
        """
        if not is_on_board(x, y):
            raise ValueError(f"Cell ({x}, {y}) is outside the {BOARD_SIZE}x{BOARD_SIZE} board")
        self._cells[y][x] = value

    def copy(self) -> "BoardState":
        """Deep copy of this board."""
        return BoardState(self._cells)

    def occupied_count(self) -> int:
        """Number of non-empty cells."""
        return sum(1 for row in self._cells for cell in row if cell != EMPTY)

    def count(self, player: Player) -> int:
        """Number of discs of one color."""
        disc = disc_for(player)
        return sum(1 for row in self._cells for cell in row if cell == disc)

    def rows(self) -> Tuple[Tuple[int, ...], ...]:
        """Immutable row-major view of the grid."""
        return tuple(tuple(row) for row in self._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoardState):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        symbols = {EMPTY: ".", BLACK_DISC: "B", WHITE_DISC: "W"}
        return "\n".join("".join(symbols[cell] for cell in row) for row in self._cells)
