"""Deterministic sample replays for demos and tests."""

import dataclasses
import random
import time
from typing import Any, Dict, List, Optional, Tuple

from orae.models.board_state import EMPTY, BoardState, disc_for
from orae.models.replay_data import (
    BOARD_SIZE, AlternativeMove, CellPosition, EndReason, FinalScore, GameAnalysis, GameInfo, GameMode,
    GameReplay, GameResult, MoveRecord, Player, PlayerInfo, ReplayMetadata, Winner
)
from orae.services.game_analysis_service import GameAnalysisService
from orae.services.logging_service import LoggingService
from orae.services.replay_perspective import ReplayPerspective


HOUR_MS = 60 * 60 * 1000

DIRECTIONS = [(-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1)]

OPPONENTS = [
    ("Nebula Flipper", False, 1420),
    ("Galaxy Conqueror", False, 1650),
    ("Corner Keeper", False, 1880),
    ("Stellar Edge", False, 1510),
]
AI_LEVELS = [("easy", 1100), ("medium", 1400), ("hard", 1750), ("expert", 2050)]
OPENINGS = ["Diagonal Opening", "Perpendicular Opening", "Parallel Opening", "Corner Rush"]
TAGS = ["tournament", "practice", "comeback", "ranked", "blitz"]


def flips_for(board: BoardState, x: int, y: int, player: Player) -> List[CellPosition]:
    """Opponent discs bracketed by a placement at (x, y).

    Args:
        board: Board before the placement.
        x: Column of the placement.
        y: Row of the placement.
        player: Side placing the disc.

    Returns:
        Cells to flip, direction by direction.
    """
    own = disc_for(player)
    other = disc_for(player.opponent)
    flips: List[CellPosition] = []
    for dx, dy in DIRECTIONS:
        line: List[CellPosition] = []
        cx, cy = x + dx, y + dy
        while 0 <= cx < BOARD_SIZE and 0 <= cy < BOARD_SIZE and board.get(cx, cy) == other:
            line.append(CellPosition(cx, cy))
            cx, cy = cx + dx, cy + dy
        if line and 0 <= cx < BOARD_SIZE and 0 <= cy < BOARD_SIZE and board.get(cx, cy) == own:
            flips.extend(line)
    return flips


class SampleReplayService:
    """Service for generating internally consistent sample replays.

    Each game starts from an empty board. Every move lands on an empty cell
    and flips only bracketed opponent discs, so reconstruction always agrees
    with the final score.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize the sample replay service.

        Args:
            config: Configuration dictionary.
        """
        self.config = config
        self.perspective = ReplayPerspective.from_config(config)
        self.analysis_service = GameAnalysisService(config)

    def generate(self, count: int, seed: int = 0, now_ms: Optional[int] = None) -> List[GameReplay]:
        """Generate sample replays, newest first.

        Args:
            count: Number of replays.
            seed: Random seed; the same seed and now_ms give the same replays.
            now_ms: Time of the newest game (defaults to now).

        Returns:
            List of GameReplay ordered by descending start time.
        """
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        rng = random.Random(seed)

        replays: List[GameReplay] = []
        start_time = now_ms
        for index in range(count):
            start_time -= rng.randint(1, 36) * HOUR_MS
            replays.append(self._generate_replay(rng, index, start_time))

        LoggingService.get_instance().info(f"Generated {len(replays)} sample replays (seed {seed})")
        return replays

    def _generate_replay(self, rng: random.Random, index: int, start_time: int) -> GameReplay:
        mode = rng.choice(list(GameMode))
        tracked = PlayerInfo(self.perspective.tracked_name, False, rng.randint(1400, 1900))
        if mode is GameMode.AI:
            level, rating = rng.choice(AI_LEVELS)
            opponent = PlayerInfo(f"AI {level.capitalize()}", True, rating, level)
        else:
            name, is_ai, rating = rng.choice(OPPONENTS)
            opponent = PlayerInfo(name, is_ai, rating + rng.randint(-50, 50))

        tracked_is_black = rng.random() < 0.5
        player_black, player_white = (tracked, opponent) if tracked_is_black else (opponent, tracked)

        moves, board = self._generate_moves(rng, start_time, rng.randint(12, 60))
        black, white = board.count(Player.BLACK), board.count(Player.WHITE)
        if black > white:
            winner = Winner.BLACK
        elif white > black:
            winner = Winner.WHITE
        else:
            winner = Winner.DRAW

        end_time = moves[-1].timestamp + rng.randint(1, 5) * 1000
        replay = GameReplay(
            id=f"sample-{index + 1:04d}",
            mode=mode,
            player_black=player_black,
            player_white=player_white,
            result=GameResult(winner, FinalScore(black, white), EndReason.NORMAL),
            game_info=GameInfo(
                start_time=start_time,
                end_time=end_time,
                duration=(end_time - start_time) // 1000,
                total_moves=len(moves),
            ),
            moves=tuple(moves),
            analysis=GameAnalysis(0.0, 0.0, opening_name=rng.choice(OPENINGS)),
            metadata=ReplayMetadata(tags=tuple(rng.sample(TAGS, rng.randint(0, 2)))),
        )
        return dataclasses.replace(replay, analysis=self.analysis_service.build_analysis(replay))

    @staticmethod
    def _generate_moves(rng: random.Random, start_time: int,
                        move_count: int) -> Tuple[List[MoveRecord], BoardState]:
        board = BoardState()
        moves: List[MoveRecord] = []
        timestamp = start_time
        player = Player.BLACK

        for number in range(1, move_count + 1):
            empty = [(x, y) for y in range(BOARD_SIZE) for x in range(BOARD_SIZE) if board.get(x, y) == EMPTY]
            x, y = rng.choice(empty)
            flipped = flips_for(board, x, y, player)

            disc = disc_for(player)
            board.set(x, y, disc)
            for cell in flipped:
                board.set(cell.x, cell.y, disc)

            timestamp += rng.randint(1, 15) * 1000
            score = rng.randint(-45, 65)
            alternatives: Tuple[AlternativeMove, ...] = ()
            if score < 20 and len(empty) > 1:
                alt_x, alt_y = rng.choice([cell for cell in empty if cell != (x, y)])
                alternatives = (AlternativeMove(alt_x, alt_y, score + rng.randint(10, 40)),)

            moves.append(MoveRecord(
                x=x,
                y=y,
                player=player,
                timestamp=timestamp,
                move_number=number,
                flipped_cells=tuple(flipped),
                evaluation_score=score,
                is_optimal=score >= 55,
                alternative_moves=alternatives,
            ))
            player = player.opponent

        return moves, board
