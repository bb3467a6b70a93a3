"""Per-move derived fields with a bounded memo cache."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from orae.models.replay_data import MoveRecord
from orae.services.logging_service import LoggingService
from orae.services.move_analysis_service import placeholder_evaluation
from orae.utils.fifo_cache import FifoCache


DEFAULT_ENRICHMENT_CAPACITY = 10
NEUTRAL_QUALITY = 50


@dataclass(frozen=True)
class EnrichedMove:
    """A move with the fields the viewer derives from it."""
    move: MoveRecord
    index: int
    position_key: str  # "x,y"
    display_position: str  # "C4"
    is_first_move: bool
    is_last_move: bool
    quality_score: int  # 0-100
    time_diff: int  # ms since the previous move, 0 for the first
    evaluation_score: Optional[int]
    is_placeholder_evaluation: bool = False


def quality_score(move: MoveRecord, neutral: int = NEUTRAL_QUALITY,
                  score: Optional[Any] = None) -> int:
    """Quality of a move in [0, 100].

    100 for an optimal move, otherwise the neutral value shifted by the
    evaluation and clamped. Missing or malformed evaluations give the neutral
    value.

    Args:
        move: The move.
        neutral: Quality of an unevaluated move.
        score: Evaluation to use instead of move.evaluation_score.

    Returns:
        Quality score.
    """
    if move.is_optimal is True:
        return 100
    if score is None:
        score = move.evaluation_score
    if isinstance(score, bool) or not isinstance(score, (int, float)) or score != score:
        return neutral
    return int(max(0, min(100, neutral + score)))


class MoveEnrichmentService:
    """Service for enriching move logs, memoized per log identity.

    A log is identified by (length, first timestamp, last timestamp). Two
    calls with the same identity return the same list object.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize the enrichment service.

        Args:
            config: Configuration dictionary.
        """
        self.config = config
        capacity = config.get('cache', {}).get('enrichment_capacity', DEFAULT_ENRICHMENT_CAPACITY)
        analysis_config = config.get('move_analysis', {})
        self.neutral_quality = analysis_config.get('neutral_quality', NEUTRAL_QUALITY)
        self.use_placeholder_evaluation = analysis_config.get('use_placeholder_evaluation', False)
        self._cache: FifoCache[Tuple[int, int, int], List[EnrichedMove]] = FifoCache(
            capacity, "enrichment cache")

    @staticmethod
    def cache_key(moves: Sequence[MoveRecord]) -> Tuple[int, int, int]:
        """Identity of a move log.

        Args:
            moves: Move log.

        Returns:
            (length, first timestamp, last timestamp), timestamps 0 when empty.
        """
        if not moves:
            return (0, 0, 0)
        return (len(moves), moves[0].timestamp, moves[-1].timestamp)

    def enrich(self, moves: Sequence[MoveRecord]) -> List[EnrichedMove]:
        """Enrich a move log, reusing the cached result for a known identity.

        Args:
            moves: Move log.

        Returns:
            List of EnrichedMove, one per move.
        """
        return self._cache.get_or_create(self.cache_key(moves), lambda: self._build(moves))

    def _build(self, moves: Sequence[MoveRecord]) -> List[EnrichedMove]:
        last_index = len(moves) - 1
        enriched: List[EnrichedMove] = []
        for index, move in enumerate(moves):
            score = move.evaluation_score
            is_placeholder = False
            if score is None and self.use_placeholder_evaluation:
                score = placeholder_evaluation(move.x, move.y, move.player, index)
                is_placeholder = True

            time_diff = move.timestamp - moves[index - 1].timestamp if index > 0 else 0
            enriched.append(EnrichedMove(
                move=move,
                index=index,
                position_key=move.position_key,
                display_position=move.display_position,
                is_first_move=index == 0,
                is_last_move=index == last_index,
                quality_score=quality_score(move, self.neutral_quality, score),
                time_diff=time_diff,
                evaluation_score=score,
                is_placeholder_evaluation=is_placeholder,
            ))

        LoggingService.get_instance().debug(f"Enriched {len(enriched)} moves")
        return enriched

    def clear(self) -> None:
        """Drop every cached enrichment."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def cached_keys(self) -> List[Tuple[int, int, int]]:
        """Cached log identities, oldest first."""
        return self._cache.keys()
