"""Validation of raw replay records before ingestion."""

import math
from typing import Any, List, Mapping, Optional

from orae.models.replay_data import MAX_DISCS, EndReason, GameMode, Player, Winner, is_on_board


class ReplayValidationError(ValueError):
    """Raised when a replay record violates the input contract.

    Attributes:
        reasons: Every human-readable reason the record was rejected for.
    """

    def __init__(self, reasons: List[str], replay_id: Optional[str] = None) -> None:
        self.reasons = list(reasons)
        self.replay_id = replay_id
        prefix = f"Invalid replay '{replay_id}'" if replay_id else "Invalid replay"
        super().__init__(f"{prefix}: " + "; ".join(self.reasons))


def first_present(record: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key present in a mapping (None if none is)."""
    for key in keys:
        if key in record:
            return record[key]
    return None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    """Check for a finite int or float (NaN and Infinity are valid JSON for json.load)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return isinstance(value, int) or math.isfinite(value)


class ReplayValidationService:
    """Service for checking raw replay records (camelCase JSON mappings).

    Validation collects every problem instead of stopping at the first one.
    """

    MODES = {mode.value for mode in GameMode}
    WINNERS = {winner.value for winner in Winner}
    END_REASONS = {reason.value for reason in EndReason}
    PLAYERS = {player.value for player in Player}

    @staticmethod
    def validate_record(record: Any) -> List[str]:
        """Validate a raw replay record.

        Args:
            record: Parsed JSON object of one replay.

        Returns:
            List of reasons the record is invalid (empty if valid).
        """
        if not isinstance(record, Mapping):
            return [f"Replay record must be an object, got {type(record).__name__}"]

        reasons: List[str] = []
        if not isinstance(record.get('id'), str) or not record.get('id'):
            reasons.append("Missing replay id")

        mode = first_present(record, 'gameMode', 'mode')
        if mode not in ReplayValidationService.MODES:
            reasons.append(f"Unknown game mode: {mode!r}")

        for key in ('playerBlack', 'playerWhite'):
            reasons.extend(ReplayValidationService._validate_player(record.get(key), key))

        reasons.extend(ReplayValidationService._validate_result(record.get('result')))

        moves = record.get('moves')
        if not isinstance(moves, list):
            reasons.append("Missing move list")
            moves = []
        reasons.extend(ReplayValidationService._validate_moves(moves))

        reasons.extend(ReplayValidationService._validate_game_info(record.get('gameInfo'), len(moves)))

        analysis = record.get('analysis')
        if analysis is not None:
            reasons.extend(ReplayValidationService._validate_analysis(analysis))

        metadata = record.get('metadata')
        if metadata is not None:
            if not isinstance(metadata, Mapping):
                reasons.append("metadata must be an object")
            else:
                tags = metadata.get('tags')
                if tags is not None and (not isinstance(tags, list)
                                         or not all(isinstance(tag, str) for tag in tags)):
                    reasons.append("metadata.tags must be a list of strings")

        return reasons

    @staticmethod
    def _validate_player(player: Any, key: str) -> List[str]:
        if not isinstance(player, Mapping):
            return [f"Missing {key}"]
        reasons = []
        if not isinstance(player.get('name'), str):
            reasons.append(f"{key}.name must be a string")
        rating = player.get('rating')
        if rating is not None and not _is_number(rating):
            reasons.append(f"{key}.rating must be a number, got {rating!r}")
        return reasons

    @staticmethod
    def _validate_result(result: Any) -> List[str]:
        if not isinstance(result, Mapping):
            return ["Missing result"]

        reasons = []
        winner = result.get('winner')
        if winner not in ReplayValidationService.WINNERS:
            reasons.append(f"Unknown winner: {winner!r}")

        end_reason = first_present(result, 'gameEndReason', 'endReason')
        if end_reason is not None and end_reason not in ReplayValidationService.END_REASONS:
            reasons.append(f"Unknown end reason: {end_reason!r}")

        score = result.get('finalScore')
        if not isinstance(score, Mapping):
            reasons.append("Missing result.finalScore")
            return reasons

        black, white = score.get('black'), score.get('white')
        if not _is_int(black) or not _is_int(white):
            reasons.append(f"Final score must be integers, got black={black!r} white={white!r}")
            return reasons
        if black < 0 or white < 0:
            reasons.append(f"Final score must not be negative, got black={black} white={white}")
        if black + white > MAX_DISCS:
            reasons.append(f"Final score {black} + {white} exceeds {MAX_DISCS} discs")
        return reasons

    @staticmethod
    def _validate_moves(moves: List[Any]) -> List[str]:
        reasons: List[str] = []
        previous_number: Optional[int] = None
        previous_timestamp: Optional[int] = None

        for index, move in enumerate(moves):
            label = f"Move {index}"
            if not isinstance(move, Mapping):
                reasons.append(f"{label} must be an object")
                continue

            x, y = move.get('x'), move.get('y')
            if not is_on_board(x, y):
                reasons.append(f"{label} is off the board: ({x}, {y})")

            if move.get('player') not in ReplayValidationService.PLAYERS:
                reasons.append(f"{label} has unknown player {move.get('player')!r}")

            flipped = first_present(move, 'flippedDiscs', 'flippedCells')
            if flipped is None:
                flipped = []
            if not isinstance(flipped, list):
                reasons.append(f"{label} flipped cells must be a list")
            else:
                for cell in flipped:
                    cell_x = cell.get('x') if isinstance(cell, Mapping) else None
                    cell_y = cell.get('y') if isinstance(cell, Mapping) else None
                    if not is_on_board(cell_x, cell_y):
                        reasons.append(f"{label} flips a cell off the board: ({cell_x}, {cell_y})")

            number = move.get('moveNumber')
            if not _is_int(number):
                reasons.append(f"{label} has no integer moveNumber")
            else:
                if previous_number is not None and number <= previous_number:
                    reasons.append(f"{label} moveNumber {number} does not increase (previous {previous_number})")
                previous_number = number

            timestamp = move.get('timestamp')
            if not _is_int(timestamp):
                reasons.append(f"{label} has no integer timestamp")
            else:
                if previous_timestamp is not None and timestamp < previous_timestamp:
                    reasons.append(f"{label} timestamp {timestamp} is earlier than {previous_timestamp}")
                previous_timestamp = timestamp

            score = move.get('evaluationScore')
            if score is not None and not _is_number(score):
                reasons.append(f"{label} evaluationScore must be a number, got {score!r}")

            alternatives = move.get('alternativeMoves')
            if alternatives is not None:
                if not isinstance(alternatives, list):
                    reasons.append(f"{label} alternativeMoves must be a list")
                elif not all(isinstance(alt, Mapping) and is_on_board(alt.get('x'), alt.get('y'))
                             and (alt.get('score') is None or _is_number(alt.get('score')))
                             for alt in alternatives):
                    reasons.append(f"{label} has a malformed alternative move")

        return reasons

    @staticmethod
    def _validate_analysis(analysis: Any) -> List[str]:
        if not isinstance(analysis, Mapping):
            return ["analysis must be an object"]

        reasons = []
        accuracy = analysis.get('accuracy')
        if accuracy is not None:
            if not isinstance(accuracy, Mapping) or not all(
                    _is_number(accuracy.get(side, 0)) for side in ('black', 'white')):
                reasons.append("analysis.accuracy must hold numeric black/white values")

        opening_name = analysis.get('openingName')
        if opening_name is not None and not isinstance(opening_name, str):
            reasons.append(f"analysis.openingName must be a string, got {opening_name!r}")

        turning_points = analysis.get('turningPoints')
        if turning_points is not None:
            if not isinstance(turning_points, list):
                reasons.append(f"analysis.turningPoints must be a list, got {turning_points!r}")
            else:
                for point in turning_points:
                    if not isinstance(point, Mapping) or not all(
                            _is_int(point.get(key))
                            for key in ('moveNumber', 'previousEvaluation', 'newEvaluation')):
                        reasons.append(f"Malformed turning point: {point!r}")

        for key in ('bestMoves', 'blunders'):
            numbers = analysis.get(key)
            if numbers is not None and (not isinstance(numbers, list)
                                        or not all(_is_int(number) for number in numbers)):
                reasons.append(f"analysis.{key} must be a list of move numbers, got {numbers!r}")

        phases = analysis.get('gamePhases')
        if phases is not None:
            if not isinstance(phases, Mapping):
                reasons.append("analysis.gamePhases must be an object")
            else:
                for name in ('opening', 'midgame', 'endgame'):
                    phase = phases.get(name)
                    if phase is None:
                        continue
                    if not isinstance(phase, Mapping) or not all(
                            _is_int(phase.get(key, 0)) for key in ('startMove', 'endMove')):
                        reasons.append(f"Malformed analysis.gamePhases.{name}: {phase!r}")

        time_analysis = analysis.get('timeAnalysis')
        if time_analysis is not None:
            reasons.extend(ReplayValidationService._validate_time_analysis(time_analysis))
        return reasons

    @staticmethod
    def _validate_time_analysis(time_analysis: Any) -> List[str]:
        if not isinstance(time_analysis, Mapping):
            return ["analysis.timeAnalysis must be an object"]

        reasons = []
        think = time_analysis.get('averageThinkTime')
        if think is not None and (not isinstance(think, Mapping)
                                  or not all(_is_number(think.get(side, 0)) for side in ('black', 'white'))):
            reasons.append("analysis.timeAnalysis.averageThinkTime must hold numeric black/white values")

        longest = time_analysis.get('longestThink')
        if longest is not None and (not isinstance(longest, Mapping)
                                    or longest.get('player') not in ReplayValidationService.PLAYERS
                                    or not _is_int(longest.get('moveNumber'))
                                    or not _is_number(longest.get('duration'))):
            reasons.append("Malformed analysis.timeAnalysis.longestThink")

        distribution = time_analysis.get('timeDistribution')
        if distribution is not None and not isinstance(distribution, str):
            reasons.append(f"analysis.timeAnalysis.timeDistribution must be a string, got {distribution!r}")
        return reasons

    @staticmethod
    def _validate_game_info(game_info: Any, move_count: int) -> List[str]:
        if not isinstance(game_info, Mapping):
            return ["Missing gameInfo"]

        reasons = []
        start, end = game_info.get('startTime'), game_info.get('endTime')
        if not _is_int(start) or not _is_int(end):
            reasons.append(f"gameInfo times must be integers, got start={start!r} end={end!r}")
        elif start >= end:
            reasons.append(f"gameInfo.startTime {start} is not before endTime {end}")

        duration = game_info.get('duration')
        if not _is_number(duration) or duration < 0:
            reasons.append(f"gameInfo.duration must be a non-negative number, got {duration!r}")

        total_moves = game_info.get('totalMoves')
        if total_moves != move_count:
            reasons.append(f"gameInfo.totalMoves {total_moves!r} does not match {move_count} moves")
        return reasons
