"""Filter and sort options for replay collections."""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional

from orae.models.replay_data import GameMode


class OpponentFilter(Enum):
    """Opponent kinds."""
    HUMAN = "human"
    AI = "ai"
    ANY = "any"


class ResultFilter(Enum):
    """Results from the tracked player's point of view."""
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"
    ANY = "any"


class SortField(Enum):
    """Available sort keys."""
    DATE = "date"
    DURATION = "duration"
    RATING = "rating"  # sum of both ratings
    ACCURACY = "accuracy"  # sum of both accuracies
    MOVE_COUNT = "moveCount"


class SortDirection(Enum):
    """Sort directions."""
    ASCENDING = "asc"
    DESCENDING = "desc"


class QuickFilter(Enum):
    """Preset filters offered by the replay list."""
    RECENT_WINS = "recent_wins"
    CHALLENGING_GAMES = "challenging_games"
    AI_MATCHES = "ai_matches"
    LONG_GAMES = "long_games"


@dataclass(frozen=True)
class DateRange:
    """Inclusive game start-time range (ms since epoch)."""
    start_ms: int
    end_ms: int


@dataclass(frozen=True)
class RatingRange:
    """Inclusive rating range."""
    min_rating: int
    max_rating: int


@dataclass(frozen=True)
class ReplayFilters:
    """Conjunctive filter over a replay collection.

    Empty or ANY fields impose no constraint.
    """
    modes: FrozenSet[GameMode] = field(default_factory=frozenset)
    opponent: OpponentFilter = OpponentFilter.ANY
    result: ResultFilter = ResultFilter.ANY
    date_range: Optional[DateRange] = None
    min_duration: Optional[int] = None  # seconds
    max_duration: Optional[int] = None  # seconds
    rating_range: Optional[RatingRange] = None
    tags: FrozenSet[str] = field(default_factory=frozenset)

    def is_empty(self) -> bool:
        """Check whether the filter constrains nothing."""
        return self == ReplayFilters()


@dataclass(frozen=True)
class ReplaySortOptions:
    """Sort key and direction."""
    field: SortField = SortField.DATE
    direction: SortDirection = SortDirection.DESCENDING
