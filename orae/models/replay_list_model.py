"""Replay list state model."""

from typing import List, Optional, Sequence

from PyQt6.QtCore import QObject, pyqtSignal

from orae.models.replay_data import GameReplay
from orae.models.replay_filters import ReplayFilters, ReplaySortOptions


class ReplayListModel(QObject):
    """Model holding the replay collection and its filter, sort and search state.

    The filtered result is computed by the controller and stored here.
    """

    replays_changed = pyqtSignal()  # Emitted when the source collection is replaced
    query_changed = pyqtSignal()  # Emitted when filters, sort or search text change
    filtered_replays_changed = pyqtSignal(int)  # Emitted with the filtered count

    def __init__(self) -> None:
        """Initialize the replay list model."""
        super().__init__()
        self._replays: List[GameReplay] = []
        self._filtered: List[GameReplay] = []
        self._filters = ReplayFilters()
        self._sort_options = ReplaySortOptions()
        self._search_text: str = ""
        self._filter_memory: Optional[ReplayFilters] = None

    @property
    def replays(self) -> List[GameReplay]:
        return self._replays

    def set_replays(self, replays: Sequence[GameReplay]) -> None:
        self._replays = list(replays)
        self.replays_changed.emit()

    @property
    def filters(self) -> ReplayFilters:
        return self._filters

    def set_filters(self, filters: ReplayFilters) -> None:
        if self._filters != filters:
            self._filters = filters
            self.query_changed.emit()

    @property
    def sort_options(self) -> ReplaySortOptions:
        return self._sort_options

    def set_sort_options(self, sort_options: ReplaySortOptions) -> None:
        if self._sort_options != sort_options:
            self._sort_options = sort_options
            self.query_changed.emit()

    @property
    def search_text(self) -> str:
        return self._search_text

    def set_search_text(self, text: str) -> None:
        if self._search_text != text:
            self._search_text = text
            self.query_changed.emit()

    @property
    def filtered_replays(self) -> List[GameReplay]:
        return self._filtered

    def set_filtered_replays(self, replays: List[GameReplay]) -> None:
        self._filtered = replays
        self.filtered_replays_changed.emit(len(replays))

    @property
    def filter_memory(self) -> Optional[ReplayFilters]:
        """Filter saved with save_filter_memory(), if any."""
        return self._filter_memory

    def save_filter_memory(self) -> None:
        self._filter_memory = self._filters
