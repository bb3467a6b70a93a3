"""Factories for moves, replays and raw replay records used across tests."""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from orae.models.replay_data import (
    CellPosition, FinalScore, GameAnalysis, GameInfo, GameMode, GameReplay, GameResult, MoveRecord, Player,
    PlayerInfo, ReplayMetadata, Winner
)


TRACKED = "Cosmic Othello Guardian"
NOW_MS = 1_700_000_000_000
DAY_MS = 24 * 60 * 60 * 1000


def make_move(x: int, y: int, player: Player = Player.BLACK, flips: Sequence[Tuple[int, int]] = (),
              move_number: int = 1, timestamp: int = 1000, score: Optional[int] = None,
              optimal: Optional[bool] = None) -> MoveRecord:
    return MoveRecord(
        x=x,
        y=y,
        player=player,
        timestamp=timestamp,
        move_number=move_number,
        flipped_cells=tuple(CellPosition(fx, fy) for fx, fy in flips),
        evaluation_score=score,
        is_optimal=optimal,
    )


def scenario_moves() -> List[MoveRecord]:
    """Three moves: a lone black disc, a white capture, a black recapture."""
    return [
        make_move(1, 3, Player.BLACK, [], move_number=1, timestamp=1000),
        make_move(2, 2, Player.WHITE, [(1, 3)], move_number=2, timestamp=3000),
        make_move(2, 1, Player.BLACK, [(2, 2)], move_number=3, timestamp=4500),
    ]


def scored_moves(scores: Sequence[Optional[int]], start_timestamp: int = 1000) -> List[MoveRecord]:
    """Moves on distinct cells with the given evaluations and alternating colors."""
    moves = []
    for index, score in enumerate(scores):
        moves.append(make_move(
            index % 8, index // 8,
            Player.BLACK if index % 2 == 0 else Player.WHITE,
            move_number=index + 1,
            timestamp=start_timestamp + index * 1000,
            score=score,
        ))
    return moves


def make_replay(replay_id: str = "r1", mode: GameMode = GameMode.CASUAL, tracked_black: bool = True,
                winner: Winner = Winner.BLACK, start_time: int = NOW_MS - DAY_MS, duration: int = 600,
                moves: Sequence[MoveRecord] = (), opponent: str = "Nebula Flipper", opponent_ai: bool = False,
                tracked_rating: Optional[int] = 1500, opponent_rating: Optional[int] = 1500,
                tags: Sequence[str] = (), opening: Optional[str] = None,
                accuracy: Tuple[float, float] = (0.0, 0.0)) -> GameReplay:
    tracked = PlayerInfo(TRACKED, False, tracked_rating)
    other = PlayerInfo(opponent, opponent_ai, opponent_rating)
    black, white = (tracked, other) if tracked_black else (other, tracked)
    analysis = None
    if opening is not None or accuracy != (0.0, 0.0):
        analysis = GameAnalysis(accuracy[0], accuracy[1], opening_name=opening)
    return GameReplay(
        id=replay_id,
        mode=mode,
        player_black=black,
        player_white=white,
        result=GameResult(winner, FinalScore(32, 30)),
        game_info=GameInfo(start_time, start_time + duration * 1000, duration, len(moves)),
        moves=tuple(moves),
        analysis=analysis,
        metadata=ReplayMetadata(tags=tuple(tags)),
    )


def raw_record(**overrides: Any) -> Dict[str, Any]:
    """A valid camelCase replay record holding the three-move scenario."""
    record: Dict[str, Any] = {
        "id": "raw-1",
        "gameMode": "battle",
        "playerBlack": {"name": TRACKED, "rating": 1620, "isAI": False},
        "playerWhite": {"name": "AI Hard", "rating": 1750, "isAI": True, "aiLevel": "hard"},
        "result": {"winner": "black", "finalScore": {"black": 2, "white": 1}, "gameEndReason": "normal"},
        "gameInfo": {"startTime": NOW_MS, "endTime": NOW_MS + 60000, "duration": 60,
                     "boardSize": 8, "totalMoves": 3},
        "moves": [
            {"x": 1, "y": 3, "player": "black", "timestamp": 1000, "moveNumber": 1, "flippedDiscs": []},
            {"x": 2, "y": 2, "player": "white", "timestamp": 3000, "moveNumber": 2,
             "flippedDiscs": [{"x": 1, "y": 3}], "evaluationScore": -12},
            {"x": 2, "y": 1, "player": "black", "timestamp": 4500, "moveNumber": 3,
             "flippedDiscs": [{"x": 2, "y": 2}], "evaluationScore": 35, "isOptimal": True,
             "alternativeMoves": [{"x": 0, "y": 0, "score": 10}]},
        ],
        "metadata": {"version": "1.0.0", "platform": "web", "tags": ["ranked"]},
    }
    record.update(overrides)
    return record
