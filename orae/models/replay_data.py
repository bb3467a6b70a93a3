"""Replay record data: moves, players, results and analysis."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


BOARD_SIZE = 8
MAX_DISCS = BOARD_SIZE * BOARD_SIZE
COLUMN_LETTERS = "ABCDEFGH"


class Player(Enum):
    """Disc colors."""
    BLACK = "black"
    WHITE = "white"

    @property
    def opponent(self) -> "Player":
        """The other color."""
        return Player.WHITE if self is Player.BLACK else Player.BLACK


class GameMode(Enum):
    """Game modes a replay can come from."""
    TOWER = "tower"
    BATTLE = "battle"
    CASUAL = "casual"
    AI = "ai"


class Winner(Enum):
    """Game outcome from the board's point of view."""
    BLACK = "black"
    WHITE = "white"
    DRAW = "draw"


class EndReason(Enum):
    """Why a game ended."""
    NORMAL = "normal"
    RESIGNATION = "resignation"
    TIMEOUT = "timeout"
    DISCONNECT = "disconnect"


def is_on_board(x: int, y: int) -> bool:
    """Check that a coordinate pair lies on the 8x8 board.

    Args:
        x: Column index.
        y: Row index.

    Returns:
        True if both coordinates are integers in [0, 7].
    """
    return (isinstance(x, int) and isinstance(y, int)
            and not isinstance(x, bool) and not isinstance(y, bool)
            and 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE)


def position_key(x: int, y: int) -> str:
    """Canonical string key for a cell ("x,y")."""
    return f"{x},{y}"


def display_position(x: int, y: int) -> str:
    """Algebraic notation for a cell: column letter from x, row number from y + 1.

    Args:
        x: Column index (0 = A).
        y: Row index (0 = row 1).

    Returns:
        Notation such as "C4".
    """
    return f"{COLUMN_LETTERS[x]}{y + 1}"


@dataclass(frozen=True)
class CellPosition:
    """A board cell."""
    x: int
    y: int


@dataclass(frozen=True)
class AlternativeMove:
    """An alternative placement with its evaluation."""
    x: int
    y: int
    score: int


@dataclass(frozen=True)
class MoveRecord:
    """A single placed disc with its already-resolved flips."""
    x: int
    y: int
    player: Player
    timestamp: int  # ms, non-decreasing within a log
    move_number: int  # 1-based, strictly increasing within a log
    flipped_cells: Tuple[CellPosition, ...] = ()
    evaluation_score: Optional[int] = None
    is_optimal: Optional[bool] = None
    alternative_moves: Tuple[AlternativeMove, ...] = ()

    @property
    def position_key(self) -> str:
        return position_key(self.x, self.y)

    @property
    def display_position(self) -> str:
        return display_position(self.x, self.y)


@dataclass(frozen=True)
class PlayerInfo:
    """One side of a game."""
    name: str
    is_ai: bool = False
    rating: Optional[int] = None
    ai_level: Optional[str] = None  # easy, medium, hard, expert


@dataclass(frozen=True)
class FinalScore:
    """Disc counts at the end of the game."""
    black: int
    white: int


@dataclass(frozen=True)
class GameResult:
    """Outcome of a game."""
    winner: Winner
    final_score: FinalScore
    end_reason: EndReason = EndReason.NORMAL


@dataclass(frozen=True)
class GameInfo:
    """Timing information of a game."""
    start_time: int  # ms since epoch
    end_time: int  # ms since epoch
    duration: int  # seconds
    total_moves: int
    board_size: int = BOARD_SIZE


@dataclass(frozen=True)
class ReplayMetadata:
    """Free-form replay metadata."""
    version: str = "1.0.0"
    platform: str = "web"
    location: Optional[str] = None
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TurningPoint:
    """A move where the evaluation swung sharply."""
    move_number: int
    previous_evaluation: int
    new_evaluation: int
    significance: str  # major, critical
    description: str = ""


@dataclass(frozen=True)
class PhaseRange:
    """Move-number range of a game phase."""
    start_move: int
    end_move: int
    evaluation: str = ""


@dataclass(frozen=True)
class GamePhases:
    """Opening, midgame and endgame ranges."""
    opening: PhaseRange
    midgame: PhaseRange
    endgame: PhaseRange


@dataclass(frozen=True)
class LongestThink:
    """The slowest move of a game."""
    move_number: int
    player: Player
    duration: int  # ms


@dataclass(frozen=True)
class TimeAnalysis:
    """Think-time summary of a game."""
    average_think_black: float  # ms
    average_think_white: float  # ms
    longest_think: Optional[LongestThink]
    distribution: str  # even, frontloaded, backloaded


@dataclass(frozen=True)
class GameAnalysis:
    """Per-game analysis summary."""
    accuracy_black: float  # 0-100
    accuracy_white: float  # 0-100
    turning_points: Tuple[TurningPoint, ...] = ()
    opening_name: Optional[str] = None
    phases: Optional[GamePhases] = None
    best_moves: Tuple[int, ...] = ()
    blunders: Tuple[int, ...] = ()
    time_analysis: Optional[TimeAnalysis] = None


@dataclass(frozen=True)
class GameReplay:
    """A complete recorded game."""
    id: str
    mode: GameMode
    player_black: PlayerInfo
    player_white: PlayerInfo
    result: GameResult
    game_info: GameInfo
    moves: Tuple[MoveRecord, ...] = ()
    analysis: Optional[GameAnalysis] = None
    metadata: ReplayMetadata = field(default_factory=ReplayMetadata)

    def player(self, side: Player) -> PlayerInfo:
        """Get the player of one side.

        Args:
            side: Disc color.

        Returns:
            PlayerInfo of that side.
        """
        return self.player_black if side is Player.BLACK else self.player_white
