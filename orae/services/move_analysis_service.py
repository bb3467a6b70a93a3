"""Move quality classification, commentary and evaluation swings."""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from orae.models.replay_data import MoveRecord, Player, TurningPoint, display_position


DEFAULT_TURNING_POINT_THRESHOLD = 20
DEFAULT_CRITICAL_SWING = 40

SEVERITY_EXCELLENT = "excellent"
SEVERITY_GOOD = "good"
SEVERITY_INACCURACY = "inaccuracy"
SEVERITY_MISTAKE = "mistake"
SEVERITY_BLUNDER = "blunder"


@dataclass(frozen=True)
class MoveClassification:
    """Verdict for a single move."""
    severity: str
    label: str
    description: str
    is_critical: bool  # worth highlighting in the viewer
    should_pause: bool  # auto-play stops on this move


@dataclass(frozen=True)
class MoveStatistics:
    """Counts of move classes over a move list."""
    excellent: int
    good: int
    inaccuracies: int
    mistakes: int
    blunders: int
    analyzed_moves: int
    total_moves: int
    accuracy: float  # (excellent + good) / total * 100


def is_turning_point(previous_score: Optional[int], score: Optional[int],
                     threshold: int = DEFAULT_TURNING_POINT_THRESHOLD) -> bool:
    """Check whether two consecutive evaluations form a turning point.

    Both scores must be present and differ by strictly more than the threshold.

    Args:
        previous_score: Evaluation of the previous move.
        score: Evaluation of the current move.
        threshold: Swing that must be exceeded.

    Returns:
        True for a turning point.
    """
    if previous_score is None or score is None:
        return False
    return abs(score - previous_score) > threshold


def placeholder_evaluation(x: int, y: int, player: Player, move_index: int) -> int:
    """Stable stand-in score in [-50, 49] for moves without an evaluation.

    This is cosmetic filler derived from a hash of the coordinates, the side
    and the move index. It is not produced by any engine and must not be
    presented as one.
    """
    seed = (x + 1) * 31 + (y + 1) * 131 + (997 if player is Player.BLACK else 499) + move_index * 17
    value = math.sin(seed) * 10000
    fraction = value - math.floor(value)
    return math.floor(fraction * 100) - 50


class MoveAnalysisService:
    """Service for judging individual moves and evaluation swings."""

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize the move analysis service.

        Args:
            config: Configuration dictionary.
        """
        self.config = config
        analysis_config = config.get('move_analysis', {})
        thresholds = analysis_config.get('thresholds', {})
        self.excellent_min = thresholds.get('excellent_min', 50)
        self.good_min = thresholds.get('good_min', 20)
        self.inaccuracy_min = thresholds.get('inaccuracy_min', -10)
        self.mistake_min = thresholds.get('mistake_min', -30)
        self.turning_point_threshold = analysis_config.get('turning_point_threshold',
                                                           DEFAULT_TURNING_POINT_THRESHOLD)
        self.critical_swing = analysis_config.get('critical_swing', DEFAULT_CRITICAL_SWING)

    def classify(self, move: MoveRecord) -> Optional[MoveClassification]:
        """Classify a move from its evaluation.

        Args:
            move: Move to classify.

        Returns:
            MoveClassification, or None if the move carries no evaluation.
        """
        score = move.evaluation_score
        if score is None:
            return None

        if move.is_optimal or score >= self.excellent_min:
            return MoveClassification(SEVERITY_EXCELLENT, "Best move", "A perfect move!", True, False)
        if score >= self.good_min:
            return MoveClassification(SEVERITY_GOOD, "Good move", "A good choice.", False, False)
        if score >= self.inaccuracy_min:
            return MoveClassification(SEVERITY_INACCURACY, "Inaccuracy",
                                      "There was a better move.", False, False)
        if score >= self.mistake_min:
            return MoveClassification(SEVERITY_MISTAKE, "Mistake",
                                      "This move worsened the position.", False, False)
        return MoveClassification(SEVERITY_BLUNDER, "Blunder", "A serious mistake!", True, True)

    def commentary(self, move: MoveRecord, classification: MoveClassification) -> str:
        """Describe a move in one or two sentences.

        Args:
            move: The move.
            classification: Verdict from classify().

        Returns:
            Commentary text.
        """
        side = "Black" if move.player is Player.BLACK else "White"
        flips = len(move.flipped_cells)
        text = (f"{side} played {move.display_position} and flipped "
                f"{flips} disc{'s' if flips != 1 else ''}. ")

        verdicts = {
            SEVERITY_EXCELLENT: "This was the best choice and secured a favorable position.",
            SEVERITY_GOOD: "A good move that kept the game on track.",
            SEVERITY_INACCURACY: "An inaccuracy; a better alternative was available.",
            SEVERITY_MISTAKE: "A mistake that handed the opponent an advantage.",
            SEVERITY_BLUNDER: "A blunder that swung the game.",
        }
        text += verdicts[classification.severity]

        if move.alternative_moves:
            best = move.alternative_moves[0]
            text += f" {display_position(best.x, best.y)} would have been better."
        return text

    def detect_turning_points(self, moves: Sequence[MoveRecord]) -> List[TurningPoint]:
        """Find the moves where the evaluation swung sharply.

        Args:
            moves: Move log.

        Returns:
            Turning points in move order, graded major or critical.
        """
        turning_points: List[TurningPoint] = []
        for index in range(1, len(moves)):
            previous, current = moves[index - 1], moves[index]
            if not is_turning_point(previous.evaluation_score, current.evaluation_score,
                                    self.turning_point_threshold):
                continue
            change = abs(current.evaluation_score - previous.evaluation_score)
            significance = "critical" if change >= self.critical_swing else "major"
            turning_points.append(TurningPoint(
                move_number=current.move_number,
                previous_evaluation=previous.evaluation_score,
                new_evaluation=current.evaluation_score,
                significance=significance,
                description=f"Evaluation swung by {change} at {current.display_position}",
            ))
        return turning_points

    def move_statistics(self, moves: Sequence[MoveRecord]) -> MoveStatistics:
        """Count move classes over a move list.

        Args:
            moves: Moves to count (all moves of a game or one side's moves).

        Returns:
            MoveStatistics (accuracy 0 for an empty list).
        """
        counts = {
            SEVERITY_EXCELLENT: 0,
            SEVERITY_GOOD: 0,
            SEVERITY_INACCURACY: 0,
            SEVERITY_MISTAKE: 0,
            SEVERITY_BLUNDER: 0,
        }
        analyzed = 0
        for move in moves:
            classification = self.classify(move)
            if classification is not None:
                counts[classification.severity] += 1
                analyzed += 1

        total = len(moves)
        good_moves = counts[SEVERITY_EXCELLENT] + counts[SEVERITY_GOOD]
        return MoveStatistics(
            excellent=counts[SEVERITY_EXCELLENT],
            good=counts[SEVERITY_GOOD],
            inaccuracies=counts[SEVERITY_INACCURACY],
            mistakes=counts[SEVERITY_MISTAKE],
            blunders=counts[SEVERITY_BLUNDER],
            analyzed_moves=analyzed,
            total_moves=total,
            accuracy=(good_moves / total) * 100 if total > 0 else 0.0,
        )

    @staticmethod
    def evaluation_graph(moves: Sequence[MoveRecord]) -> List[int]:
        """Evaluation per move for plotting (0 where absent)."""
        return [move.evaluation_score if move.evaluation_score is not None else 0 for move in moves]
