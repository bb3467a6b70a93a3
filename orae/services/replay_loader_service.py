"""Service for turning raw replay records into GameReplay objects."""

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from orae.models.replay_data import (
    AlternativeMove, CellPosition, EndReason, FinalScore, GameAnalysis, GameInfo, GameMode, GamePhases,
    GameReplay, GameResult, LongestThink, MoveRecord, PhaseRange, Player, PlayerInfo, ReplayMetadata,
    TimeAnalysis, TurningPoint, Winner
)
from orae.services.logging_service import LoggingService
from orae.services.replay_validation_service import (
    ReplayValidationError, ReplayValidationService, first_present
)


def _score(value: Any) -> Optional[int]:
    if value is None:
        return None
    return int(round(value))


class ReplayLoaderService:
    """Service for parsing replay records (camelCase JSON) into models.

    Every record is validated first; nothing is ever written back.
    """

    @staticmethod
    def parse_replay(record: Mapping[str, Any]) -> GameReplay:
        """Parse one replay record.

        Args:
            record: Raw replay mapping.

        Returns:
            GameReplay.

        Raises:
            ReplayValidationError: If the record is invalid, with every reason.
        """
        reasons = ReplayValidationService.validate_record(record)
        if reasons:
            replay_id = record.get('id') if isinstance(record, Mapping) else None
            raise ReplayValidationError(reasons, replay_id if isinstance(replay_id, str) else None)

        result = record['result']
        score = result['finalScore']
        info = record['gameInfo']
        metadata = record.get('metadata') or {}
        analysis = record.get('analysis')

        return GameReplay(
            id=record['id'],
            mode=GameMode(first_present(record, 'gameMode', 'mode')),
            player_black=ReplayLoaderService._parse_player(record['playerBlack']),
            player_white=ReplayLoaderService._parse_player(record['playerWhite']),
            result=GameResult(
                winner=Winner(result['winner']),
                final_score=FinalScore(score['black'], score['white']),
                end_reason=EndReason(first_present(result, 'gameEndReason', 'endReason') or 'normal'),
            ),
            game_info=GameInfo(
                start_time=info['startTime'],
                end_time=info['endTime'],
                duration=info['duration'],
                total_moves=info['totalMoves'],
                board_size=info.get('boardSize', 8),
            ),
            moves=tuple(ReplayLoaderService._parse_move(move) for move in record['moves']),
            analysis=ReplayLoaderService._parse_analysis(analysis) if isinstance(analysis, Mapping) else None,
            metadata=ReplayMetadata(
                version=metadata.get('version', "1.0.0"),
                platform=metadata.get('platform', "web"),
                location=metadata.get('location'),
                tags=tuple(metadata.get('tags') or ()),
            ),
        )

    @staticmethod
    def parse_replays(records: Sequence[Any]) -> Tuple[List[GameReplay], Dict[int, List[str]]]:
        """Parse many records, keeping the valid ones.

        Args:
            records: Raw replay mappings.

        Returns:
            Tuple of (parsed replays, {record index: rejection reasons}).
        """
        replays: List[GameReplay] = []
        rejected: Dict[int, List[str]] = {}
        for index, record in enumerate(records):
            try:
                replays.append(ReplayLoaderService.parse_replay(record))
            except ReplayValidationError as e:
                rejected[index] = e.reasons
                LoggingService.get_instance().warning(f"Rejected replay record {index}: {e}")
        return replays, rejected

    @staticmethod
    def load_replays_file(path: Path) -> Tuple[List[GameReplay], Dict[int, List[str]]]:
        """Load replays from a JSON file holding an array of records.

        Args:
            path: Path to the JSON file.

        Returns:
            Tuple of (parsed replays, {record index: rejection reasons}).

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not a JSON array.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Replay file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                records = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in replay file {path}: {e}") from e

        if not isinstance(records, list):
            raise ValueError(f"Replay file {path} must contain a JSON array")

        replays, rejected = ReplayLoaderService.parse_replays(records)
        LoggingService.get_instance().info(
            f"Loaded {len(replays)} replays from {path} ({len(rejected)} rejected)")
        return replays, rejected

    @staticmethod
    def _parse_player(player: Mapping[str, Any]) -> PlayerInfo:
        rating = player.get('rating')
        return PlayerInfo(
            name=player['name'],
            is_ai=bool(player.get('isAI', False)),
            rating=int(rating) if rating is not None else None,
            ai_level=player.get('aiLevel'),
        )

    @staticmethod
    def _parse_move(move: Mapping[str, Any]) -> MoveRecord:
        flipped = first_present(move, 'flippedDiscs', 'flippedCells') or []
        alternatives = move.get('alternativeMoves') or []
        is_optimal = move.get('isOptimal')
        return MoveRecord(
            x=move['x'],
            y=move['y'],
            player=Player(move['player']),
            timestamp=move['timestamp'],
            move_number=move['moveNumber'],
            flipped_cells=tuple(CellPosition(cell['x'], cell['y']) for cell in flipped),
            evaluation_score=_score(move.get('evaluationScore')),
            is_optimal=bool(is_optimal) if is_optimal is not None else None,
            alternative_moves=tuple(
                AlternativeMove(alt['x'], alt['y'], _score(alt.get('score')) or 0)
                for alt in alternatives if isinstance(alt, Mapping)
            ),
        )

    @staticmethod
    def _parse_analysis(analysis: Mapping[str, Any]) -> GameAnalysis:
        accuracy = analysis.get('accuracy') or {}

        phases = None
        raw_phases = analysis.get('gamePhases')
        if isinstance(raw_phases, Mapping):
            def phase(name: str) -> PhaseRange:
                raw = raw_phases.get(name) or {}
                return PhaseRange(raw.get('startMove', 0), raw.get('endMove', 0), raw.get('evaluation', ""))
            phases = GamePhases(phase('opening'), phase('midgame'), phase('endgame'))

        time_analysis = None
        raw_time = analysis.get('timeAnalysis')
        if isinstance(raw_time, Mapping):
            think = raw_time.get('averageThinkTime') or {}
            longest = raw_time.get('longestThink')
            time_analysis = TimeAnalysis(
                average_think_black=float(think.get('black', 0)),
                average_think_white=float(think.get('white', 0)),
                longest_think=LongestThink(longest['moveNumber'], Player(longest['player']),
                                           longest['duration']) if longest else None,
                distribution=raw_time.get('timeDistribution', "even"),
            )

        return GameAnalysis(
            accuracy_black=float(accuracy.get('black', 0)),
            accuracy_white=float(accuracy.get('white', 0)),
            turning_points=tuple(
                TurningPoint(
                    move_number=point['moveNumber'],
                    previous_evaluation=point['previousEvaluation'],
                    new_evaluation=point['newEvaluation'],
                    significance=point.get('significance', "major"),
                    description=point.get('description', ""),
                )
                for point in analysis.get('turningPoints') or ()
            ),
            opening_name=analysis.get('openingName'),
            phases=phases,
            best_moves=tuple(analysis.get('bestMoves') or ()),
            blunders=tuple(analysis.get('blunders') or ()),
            time_analysis=time_analysis,
        )
