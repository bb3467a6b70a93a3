"""Service for aggregating statistics across replays."""

import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from orae.models.replay_data import GameMode, GameReplay
from orae.services.logging_service import LoggingService
from orae.services.replay_perspective import ReplayPerspective


DAY_MS = 24 * 60 * 60 * 1000
TREND_WINDOWS_DAYS = (7, 30, 90)


@dataclass
class ModePerformance:
    """Games and win rate in one game mode."""
    games: int = 0
    win_rate: float = 0.0
    average_rating: Optional[float] = None  # tracked player's rating, None when unrated


@dataclass
class TrendBucket:
    """Games and win rate in a recency window."""
    games: int = 0
    win_rate: float = 0.0


@dataclass
class OpeningStats:
    """How often an opening was played and how it went."""
    name: str
    count: int
    win_rate: float


@dataclass
class OpponentStats:
    """Record against one opponent."""
    name: str
    games_played: int
    win_rate: float


@dataclass
class ReplayStatistics:
    """Aggregated statistics for the tracked player."""
    total_games: int = 0
    win_rate: float = 0.0
    average_game_duration: int = 0  # seconds
    average_moves_per_game: int = 0
    performance_by_mode: Dict[GameMode, ModePerformance] = field(default_factory=dict)
    recent_trends: Dict[int, TrendBucket] = field(default_factory=dict)  # days -> bucket
    favorite_openings: List[OpeningStats] = field(default_factory=list)
    strongest_opponents: List[OpponentStats] = field(default_factory=list)

    @property
    def last_7_days(self) -> TrendBucket:
        return self.recent_trends[7]

    @property
    def last_30_days(self) -> TrendBucket:
        return self.recent_trends[30]

    @property
    def last_90_days(self) -> TrendBucket:
        return self.recent_trends[90]


def _win_rate(wins: int, games: int) -> float:
    return (wins / games) * 100 if games > 0 else 0.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ReplayStatisticsService:
    """Service for computing replay collection statistics.

    Statistics are recomputed from scratch on every call.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize the statistics service.

        Args:
            config: Configuration dictionary.
        """
        self.config = config
        self.perspective = ReplayPerspective.from_config(config)
        stats_config = config.get('statistics', {})
        self.top_openings = stats_config.get('top_openings', 3)
        self.top_opponents = stats_config.get('top_opponents', 3)

    def calculate_statistics(self, replays: Sequence[GameReplay],
                             now_ms: Optional[int] = None) -> ReplayStatistics:
        """Aggregate statistics over a replay collection.

        Args:
            replays: Replays to aggregate.
            now_ms: Reference time for the recency windows (defaults to now).

        Returns:
            ReplayStatistics. Every mode and trend window is present, zero-filled
            when no replay falls into it.
        """
        if now_ms is None:
            now_ms = int(time.time() * 1000)

        statistics = ReplayStatistics(
            performance_by_mode={mode: ModePerformance() for mode in GameMode},
            recent_trends={days: TrendBucket() for days in TREND_WINDOWS_DAYS},
        )
        total = len(replays)
        if total == 0:
            return statistics

        wins = sum(1 for replay in replays if self.perspective.did_win(replay))
        statistics.total_games = total
        statistics.win_rate = _win_rate(wins, total)
        statistics.average_game_duration = _round_half_up(sum(r.game_info.duration for r in replays) / total)
        statistics.average_moves_per_game = _round_half_up(sum(r.game_info.total_moves for r in replays) / total)

        statistics.performance_by_mode = self._performance_by_mode(replays)
        for days in TREND_WINDOWS_DAYS:
            window = [r for r in replays if now_ms - r.game_info.start_time <= days * DAY_MS]
            window_wins = sum(1 for replay in window if self.perspective.did_win(replay))
            statistics.recent_trends[days] = TrendBucket(len(window), _win_rate(window_wins, len(window)))

        statistics.favorite_openings = self._favorite_openings(replays)
        statistics.strongest_opponents = self._strongest_opponents(replays)

        LoggingService.get_instance().debug(
            f"Statistics over {total} replays: win rate {statistics.win_rate:.1f}%")
        return statistics

    def _performance_by_mode(self, replays: Sequence[GameReplay]) -> Dict[GameMode, ModePerformance]:
        performance: Dict[GameMode, ModePerformance] = {}
        for mode in GameMode:
            mode_replays = [r for r in replays if r.mode is mode]
            wins = sum(1 for replay in mode_replays if self.perspective.did_win(replay))
            ratings = [self.perspective.tracked_player(r).rating for r in mode_replays]
            ratings = [rating for rating in ratings if rating is not None]
            performance[mode] = ModePerformance(
                games=len(mode_replays),
                win_rate=_win_rate(wins, len(mode_replays)),
                average_rating=sum(ratings) / len(ratings) if ratings else None,
            )
        return performance

    def _favorite_openings(self, replays: Sequence[GameReplay]) -> List[OpeningStats]:
        counts: Dict[str, List[int]] = {}  # name -> [games, wins]
        for replay in replays:
            if replay.analysis is None or not replay.analysis.opening_name:
                continue
            entry = counts.setdefault(replay.analysis.opening_name, [0, 0])
            entry[0] += 1
            if self.perspective.did_win(replay):
                entry[1] += 1

        openings = [OpeningStats(name, games, _win_rate(wins, games))
                    for name, (games, wins) in counts.items()]
        openings.sort(key=lambda opening: -opening.count)
        return openings[:self.top_openings]

    def _strongest_opponents(self, replays: Sequence[GameReplay]) -> List[OpponentStats]:
        counts: Dict[str, List[int]] = {}  # name -> [games, wins]
        for replay in replays:
            entry = counts.setdefault(self.perspective.opponent(replay).name, [0, 0])
            entry[0] += 1
            if self.perspective.did_win(replay):
                entry[1] += 1

        opponents = [OpponentStats(name, games, _win_rate(wins, games))
                     for name, (games, wins) in counts.items()]
        opponents.sort(key=lambda opponent: (opponent.win_rate, -opponent.games_played))
        return opponents[:self.top_opponents]
