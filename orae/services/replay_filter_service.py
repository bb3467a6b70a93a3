"""Service for filtering and sorting replay collections."""

import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from orae.models.replay_data import GameReplay
from orae.models.replay_filters import (
    DateRange, OpponentFilter, QuickFilter, RatingRange, ReplayFilters, ReplaySortOptions,
    ResultFilter, SortDirection, SortField
)
from orae.services.logging_service import LoggingService
from orae.services.replay_perspective import ReplayPerspective
from orae.services.replay_statistics_service import DAY_MS


LONG_GAME_SECONDS = 1800
CHALLENGING_RATING_RANGE = RatingRange(1500, 2000)


def _rating_sum(replay: GameReplay) -> int:
    return (replay.player_black.rating or 0) + (replay.player_white.rating or 0)


def _accuracy_sum(replay: GameReplay) -> float:
    if replay.analysis is None:
        return 0.0
    return replay.analysis.accuracy_black + replay.analysis.accuracy_white


SORT_KEYS: Dict[SortField, Callable[[GameReplay], Any]] = {
    SortField.DATE: lambda replay: replay.game_info.start_time,
    SortField.DURATION: lambda replay: replay.game_info.duration,
    SortField.RATING: _rating_sum,
    SortField.ACCURACY: _accuracy_sum,
    SortField.MOVE_COUNT: lambda replay: replay.game_info.total_moves,
}


def resolve_sort_field(value: Union[SortField, str]) -> SortField:
    """Resolve a sort field given as enum or name.

    Args:
        value: SortField or its string value (e.g. "moveCount").

    Returns:
        SortField.

    Raises:
        ValueError: If the field is unknown.
    """
    if isinstance(value, SortField):
        return value
    try:
        return SortField(value)
    except ValueError:
        known = ", ".join(sort_field.value for sort_field in SortField)
        message = f"Unknown sort field '{value}'. Known fields: {known}"
        LoggingService.get_instance().error(message)
        raise ValueError(message) from None


class ReplayFilterService:
    """Service for conjunctive filtering, free-text search and stable sorting."""

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize the filter service.

        Args:
            config: Configuration dictionary.
        """
        self.config = config
        self.perspective = ReplayPerspective.from_config(config)

    def apply(self, replays: Sequence[GameReplay], filters: ReplayFilters,
              sort_options: ReplaySortOptions, search_text: str = "") -> List[GameReplay]:
        """Filter, search and sort a replay collection.

        Args:
            replays: Source replays (not modified).
            filters: Filter to apply.
            sort_options: Sort key and direction.
            search_text: Case-insensitive query over player names, mode and tags.

        Returns:
            New list of matching replays in sorted order.

        Raises:
            ValueError: If the sort field is unknown.
        """
        sort_field = resolve_sort_field(sort_options.field)
        query = (search_text or "").strip().lower()

        matching = [replay for replay in replays
                    if self.matches_search(replay, query) and self.matches_filters(replay, filters)]

        # sorted() is stable, and reverse=True keeps ties in their original order
        result = sorted(matching, key=SORT_KEYS[sort_field],
                        reverse=sort_options.direction is SortDirection.DESCENDING)
        LoggingService.get_instance().debug(
            f"Filtered {len(replays)} replays to {len(result)} (sort {sort_field.value} "
            f"{sort_options.direction.value})")
        return result

    @staticmethod
    def matches_search(replay: GameReplay, query: str) -> bool:
        """Check a replay against a lower-cased search query (empty matches all)."""
        if not query:
            return True
        if query in replay.player_black.name.lower() or query in replay.player_white.name.lower():
            return True
        if query in replay.mode.value.lower():
            return True
        return any(query in tag.lower() for tag in replay.metadata.tags)

    def matches_filters(self, replay: GameReplay, filters: ReplayFilters) -> bool:
        """Check a replay against every constraint of a filter.

        Args:
            replay: Replay to check.
            filters: Filter to apply.

        Returns:
            True if the replay satisfies all constraints.
        """
        if filters.modes and replay.mode not in filters.modes:
            return False

        if filters.result is not ResultFilter.ANY:
            if self.perspective.outcome(replay) != filters.result.value:
                return False

        if filters.opponent is not OpponentFilter.ANY:
            opponent_is_ai = self.perspective.opponent(replay).is_ai
            if filters.opponent is OpponentFilter.AI and not opponent_is_ai:
                return False
            if filters.opponent is OpponentFilter.HUMAN and opponent_is_ai:
                return False

        if filters.date_range is not None:
            start_time = replay.game_info.start_time
            if start_time < filters.date_range.start_ms or start_time > filters.date_range.end_ms:
                return False

        duration = replay.game_info.duration
        if filters.min_duration is not None and duration < filters.min_duration:
            return False
        if filters.max_duration is not None and duration > filters.max_duration:
            return False

        if filters.rating_range is not None:
            # Highest rating of the two players
            rating = max(replay.player_black.rating or 0, replay.player_white.rating or 0)
            if rating < filters.rating_range.min_rating or rating > filters.rating_range.max_rating:
                return False

        if filters.tags:
            replay_tags = [tag.lower() for tag in replay.metadata.tags]
            if not any(tag.lower() in replay_tag for tag in filters.tags for replay_tag in replay_tags):
                return False

        return True

    @staticmethod
    def quick_filter(kind: QuickFilter, now_ms: Optional[int] = None) -> ReplayFilters:
        """Build a preset filter.

        Args:
            kind: Preset to build.
            now_ms: Reference time for date-based presets (defaults to now).

        Returns:
            ReplayFilters for the preset.
        """
        if now_ms is None:
            now_ms = int(time.time() * 1000)

        if kind is QuickFilter.RECENT_WINS:
            return ReplayFilters(result=ResultFilter.WIN,
                                 date_range=DateRange(now_ms - 7 * DAY_MS, now_ms))
        if kind is QuickFilter.CHALLENGING_GAMES:
            return ReplayFilters(rating_range=CHALLENGING_RATING_RANGE)
        if kind is QuickFilter.AI_MATCHES:
            return ReplayFilters(opponent=OpponentFilter.AI)
        return ReplayFilters(min_duration=LONG_GAME_SECONDS)
