"""Service for building per-game analysis summaries."""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from asteval import Interpreter

from orae.models.replay_data import (
    GameAnalysis, GamePhases, GameReplay, LongestThink, MoveRecord, PhaseRange, Player, TimeAnalysis
)
from orae.services.logging_service import LoggingService
from orae.services.move_analysis_service import SEVERITY_BLUNDER, MoveAnalysisService


DEFAULT_ACCURACY_FORMULA = "100.0 * (excellent + good) / analyzed_moves if analyzed_moves > 0 else 0.0"


class GameAnalysisService:
    """Service for summarizing a replay: accuracy, phases, key moves and timing."""

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize the game analysis service.

        Args:
            config: Configuration dictionary.
        """
        self.config = config
        self.move_analysis = MoveAnalysisService(config)

        analysis_config = config.get('game_analysis', {})
        phase_config = analysis_config.get('phases', {})
        self.opening_ratio = phase_config.get('opening_ratio', 0.25)
        self.endgame_ratio = phase_config.get('endgame_ratio', 0.75)
        self.time_tolerance = analysis_config.get('time_distribution_tolerance', 0.2)

    def build_analysis(self, replay: GameReplay) -> GameAnalysis:
        """Build the analysis summary of a replay.

        Args:
            replay: Replay to analyze.

        Returns:
            GameAnalysis. The opening name of an existing analysis is kept.
        """
        moves = replay.moves
        classifications = [self.move_analysis.classify(move) for move in moves]

        analysis = GameAnalysis(
            accuracy_black=self._side_accuracy(moves, Player.BLACK),
            accuracy_white=self._side_accuracy(moves, Player.WHITE),
            turning_points=tuple(self.move_analysis.detect_turning_points(moves)),
            opening_name=replay.analysis.opening_name if replay.analysis else None,
            phases=self._phases(moves),
            best_moves=tuple(move.move_number for move in moves if move.is_optimal),
            blunders=tuple(move.move_number for move, classification in zip(moves, classifications)
                           if classification is not None and classification.severity == SEVERITY_BLUNDER),
            time_analysis=self._time_analysis(moves),
        )
        LoggingService.get_instance().debug(
            f"Analysis for replay {replay.id}: accuracy {analysis.accuracy_black:.1f}/"
            f"{analysis.accuracy_white:.1f}, {len(analysis.turning_points)} turning points")
        return analysis

    def _side_accuracy(self, moves: Sequence[MoveRecord], side: Player) -> float:
        side_moves = [move for move in moves if move.player is side]
        stats = self.move_analysis.move_statistics(side_moves)
        return self._evaluate_accuracy_formula(
            excellent=stats.excellent,
            good=stats.good,
            inaccuracies=stats.inaccuracies,
            mistakes=stats.mistakes,
            blunders=stats.blunders,
            analyzed_moves=stats.analyzed_moves,
            total_moves=stats.total_moves,
        )

    def _evaluate_accuracy_formula(self, **kwargs) -> float:
        """Evaluate the accuracy formula using asteval.

        Args:
            **kwargs: All available variables for the formula.

        Returns:
            Accuracy clamped to 0.0-100.0, or the configured fallback on error.
        """
        accuracy_config = self.config.get('game_analysis', {}).get('accuracy_formula', {})
        formula = accuracy_config.get('formula') or DEFAULT_ACCURACY_FORMULA
        value_on_error = accuracy_config.get('value_on_error', 0.0)

        try:
            aeval = Interpreter()
            for key, value in kwargs.items():
                aeval.symtable[key] = value
            aeval.symtable['min'] = min
            aeval.symtable['max'] = max
            result = aeval(formula)
            if result is None or aeval.error:
                LoggingService.get_instance().warning(
                    f"Accuracy formula produced no value, using {value_on_error}")
                return float(value_on_error)
            return max(0.0, min(100.0, float(result)))
        except (TypeError, ValueError, ArithmeticError) as e:
            LoggingService.get_instance().warning(f"Error evaluating accuracy formula: {e}")
            return float(value_on_error)

    def _phases(self, moves: Sequence[MoveRecord]) -> Optional[GamePhases]:
        """Split a game into opening, midgame and endgame move ranges.

        A phase too short to hold a move has start_move > end_move.
        """
        total = len(moves)
        if total == 0:
            return None

        opening_end = max(1, int(total * self.opening_ratio))
        midgame_end = max(opening_end, int(total * self.endgame_ratio))
        return GamePhases(
            opening=self._phase_range(moves, 1, opening_end),
            midgame=self._phase_range(moves, opening_end + 1, midgame_end),
            endgame=self._phase_range(moves, midgame_end + 1, total),
        )

    @staticmethod
    def _phase_range(moves: Sequence[MoveRecord], start: int, end: int) -> PhaseRange:
        scores = [move.evaluation_score for move in moves[start - 1:end] if move.evaluation_score is not None]
        if not scores:
            label = ""
        else:
            average = sum(scores) / len(scores)
            if average >= 20:
                label = "strong"
            elif average < -10:
                label = "weak"
            else:
                label = "steady"
        return PhaseRange(start_move=start, end_move=end, evaluation=label)

    def _time_analysis(self, moves: Sequence[MoveRecord]) -> Optional[TimeAnalysis]:
        """Summarize think times (time since the previous move).

        Returns:
            TimeAnalysis, or None for games with fewer than two moves.
        """
        if len(moves) < 2:
            return None

        thinks: List[Tuple[MoveRecord, int]] = [
            (moves[i], moves[i].timestamp - moves[i - 1].timestamp) for i in range(1, len(moves))
        ]

        def average_for(side: Player) -> float:
            durations = [duration for move, duration in thinks if move.player is side]
            return sum(durations) / len(durations) if durations else 0.0

        longest_move, longest_duration = thinks[0]
        for move, duration in thinks[1:]:
            if duration > longest_duration:
                longest_move, longest_duration = move, duration

        # Average per half; the halves differ in size for an odd count
        half = len(thinks) // 2
        first_half = sum(duration for _, duration in thinks[:half]) / half if half else 0.0
        second_half = sum(duration for _, duration in thinks[half:]) / (len(thinks) - half)
        if half == 0:
            distribution = "even"
        elif first_half > second_half * (1 + self.time_tolerance):
            distribution = "frontloaded"
        elif second_half > first_half * (1 + self.time_tolerance):
            distribution = "backloaded"
        else:
            distribution = "even"

        return TimeAnalysis(
            average_think_black=average_for(Player.BLACK),
            average_think_white=average_for(Player.WHITE),
            longest_think=LongestThink(longest_move.move_number, longest_move.player, longest_duration),
            distribution=distribution,
        )
