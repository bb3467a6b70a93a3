"""Tracked-player view of a replay."""

from typing import Any, Dict

from orae.models.replay_data import GameReplay, Player, PlayerInfo, Winner


DEFAULT_TRACKED_PLAYER = "Cosmic Othello Guardian"

OUTCOME_WIN = "win"
OUTCOME_LOSS = "loss"
OUTCOME_DRAW = "draw"


class ReplayPerspective:
    """Resolves which side of a replay the tracked player played.

    The tracked player is black when the black player's name matches,
    otherwise white.
    """

    def __init__(self, tracked_name: str = DEFAULT_TRACKED_PLAYER) -> None:
        self.tracked_name = tracked_name

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ReplayPerspective":
        """Create a perspective for the configured tracked player."""
        return cls(config.get('tracked_player', {}).get('name', DEFAULT_TRACKED_PLAYER))

    def tracked_side(self, replay: GameReplay) -> Player:
        return Player.BLACK if replay.player_black.name == self.tracked_name else Player.WHITE

    def tracked_player(self, replay: GameReplay) -> PlayerInfo:
        return replay.player(self.tracked_side(replay))

    def opponent(self, replay: GameReplay) -> PlayerInfo:
        return replay.player(self.tracked_side(replay).opponent)

    def did_win(self, replay: GameReplay) -> bool:
        """Check whether the tracked side won the replay."""
        return replay.result.winner.value == self.tracked_side(replay).value

    def outcome(self, replay: GameReplay) -> str:
        """Result from the tracked player's point of view.

        Returns:
            "win", "draw" or "loss" (anything that is neither a win nor a draw).
        """
        if self.did_win(replay):
            return OUTCOME_WIN
        if replay.result.winner is Winner.DRAW:
            return OUTCOME_DRAW
        return OUTCOME_LOSS
