"""Controller for the filtered, windowed replay list."""

from typing import Any, Dict, List, Optional, Sequence

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from orae.models.pagination_model import PaginationModel
from orae.models.replay_data import GameReplay
from orae.models.replay_filters import QuickFilter, ReplayFilters, ReplaySortOptions
from orae.models.replay_list_model import ReplayListModel
from orae.models.virtual_scroll_model import VirtualScrollModel, VisibleItem
from orae.services.logging_service import LoggingService
from orae.services.replay_filter_service import ReplayFilterService
from orae.services.replay_statistics_service import ReplayStatistics, ReplayStatisticsService


class ReplayListController(QObject):
    """Controller for the replay list session.

    Any filter, sort or search change re-runs the filter pipeline and resets
    pagination. Windowed loads run on the next event-loop pass and are
    dropped if a newer request was made in the meantime.
    """

    visible_window_changed = pyqtSignal(int, int)  # start, end of the applied window

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize the replay list controller.

        Args:
            config: Configuration dictionary.
        """
        super().__init__()
        self.config = config
        self.list_model = ReplayListModel()
        self.pagination_model = PaginationModel(config)
        self.scroll_model = VirtualScrollModel(config)
        self.filter_service = ReplayFilterService(config)
        self.statistics_service = ReplayStatisticsService(config)

        self._load_generation = 0
        self._window: List[VisibleItem] = []

        self.list_model.replays_changed.connect(self.refresh)
        self.list_model.query_changed.connect(self.refresh)
        self.scroll_model.visible_range_changed.connect(self._on_visible_range_changed)

    # Collection and query

    def set_replays(self, replays: Sequence[GameReplay]) -> None:
        self.list_model.set_replays(replays)

    def set_filters(self, filters: ReplayFilters) -> None:
        self.list_model.set_filters(filters)

    def set_sort_options(self, sort_options: ReplaySortOptions) -> None:
        self.list_model.set_sort_options(sort_options)

    def set_search_text(self, text: str) -> None:
        self.list_model.set_search_text(text)

    def apply_quick_filter(self, kind: QuickFilter, now_ms: Optional[int] = None) -> None:
        """Replace the current filter with a preset."""
        self.list_model.set_filters(self.filter_service.quick_filter(kind, now_ms))

    def clear_filters(self) -> None:
        """Reset filters and search text."""
        self.list_model.blockSignals(True)
        try:
            self.list_model.set_filters(ReplayFilters())
            self.list_model.set_search_text("")
        finally:
            self.list_model.blockSignals(False)
        self.refresh()

    def save_filter_memory(self) -> None:
        """Remember the current filter for this session."""
        self.list_model.save_filter_memory()

    def restore_filter_memory(self) -> bool:
        """Re-apply the remembered filter.

        Returns:
            True if a filter had been saved.
        """
        saved = self.list_model.filter_memory
        if saved is None:
            return False
        self.list_model.set_filters(saved)
        return True

    def refresh(self) -> None:
        """Re-run the filter pipeline and reset the windowed views."""
        model = self.list_model
        filtered = self.filter_service.apply(model.replays, model.filters, model.sort_options,
                                             model.search_text)
        model.set_filtered_replays(filtered)
        self.pagination_model.set_data(filtered)
        self.scroll_model.item_count = len(filtered)
        self.request_window_load()

    @property
    def filtered_replays(self) -> List[GameReplay]:
        return self.list_model.filtered_replays

    def statistics(self, now_ms: Optional[int] = None) -> ReplayStatistics:
        """Statistics over the filtered replays."""
        return self.statistics_service.calculate_statistics(self.filtered_replays, now_ms)

    # Pagination

    def page_data(self) -> List[GameReplay]:
        """Replays of every loaded page, in list order."""
        return self.pagination_model.visible_data()

    def load_more(self) -> bool:
        """Load the page after the current one.

        Returns:
            True if a page was loaded.
        """
        return self.pagination_model.preload_next_page()

    # Virtual scrolling

    def set_scroll_top(self, scroll_top: float) -> None:
        self.scroll_model.scroll_top = scroll_top

    def _on_visible_range_changed(self, start: int, end: int) -> None:
        self.request_window_load()

    def request_window_load(self) -> int:
        """Schedule materialization of the visible range on the next event-loop pass.

        Returns:
            Generation number of the scheduled load.
        """
        self._load_generation += 1
        generation = self._load_generation
        QTimer.singleShot(0, lambda: self.apply_window_load(generation))
        return generation

    def apply_window_load(self, generation: int) -> bool:
        """Materialize the visible range if the request is still current.

        Args:
            generation: Generation number returned by request_window_load().

        Returns:
            True if the load was applied, False if it was superseded.
        """
        if generation != self._load_generation:
            LoggingService.get_instance().debug(
                f"Ignoring stale window load {generation} (current {self._load_generation})")
            return False

        visible_range = self.scroll_model.visible_range
        self._window = self.scroll_model.visible_items(self.filtered_replays)
        if not visible_range.is_empty:
            last_page = visible_range.end // self.pagination_model.page_size
            for page in range(last_page + 1):
                if not self.pagination_model.is_page_loaded(page):
                    self.pagination_model.load_page(page)
        self.visible_window_changed.emit(visible_range.start, visible_range.end)
        return True

    @property
    def visible_window(self) -> List[VisibleItem]:
        """Items materialized by the last applied window load."""
        return self._window
