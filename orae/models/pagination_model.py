"""Page-based incremental loading over a collection."""

import math
from typing import Any, Dict, List, Sequence, Set

from PyQt6.QtCore import QObject, pyqtSignal

from orae.services.logging_service import LoggingService


class PaginationModel(QObject):
    """Model tracking which fixed-size pages of a collection are loaded.

    Page 0 is loaded from the start. Visible data is the union of loaded
    pages, always in collection order.
    """

    page_loaded = pyqtSignal(int)  # page index
    pages_reset = pyqtSignal()

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize the pagination model.

        Args:
            config: Configuration dictionary.
        """
        super().__init__()
        self.page_size: int = config.get('windowing', {}).get('page_size', 50)
        if self.page_size < 1:
            raise ValueError(f"Page size must be at least 1, got {self.page_size}")
        self._data: Sequence[Any] = ()
        self._loaded_pages: Set[int] = {0}
        self._current_page: int = 0

    def set_data(self, data: Sequence[Any]) -> None:
        """Replace the collection and reset to the first page."""
        self._data = data
        self._loaded_pages = {0}
        self._current_page = 0
        self.pages_reset.emit()

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self._data) / self.page_size)

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def loaded_pages(self) -> List[int]:
        """Loaded page indices, ascending."""
        return sorted(self._loaded_pages)

    def is_page_loaded(self, page: int) -> bool:
        return page in self._loaded_pages

    def load_page(self, page: int, strict: bool = False) -> bool:
        """Load a page and make it current.

        Args:
            page: Page index.
            strict: Raise instead of ignoring an out-of-range page.

        Returns:
            True if the page index was in range.

        Raises:
            IndexError: If strict and the page is outside [0, total_pages).
        """
        if not 0 <= page < self.total_pages:
            if strict:
                message = f"Page {page} is out of range (0 to {self.total_pages - 1})"
                LoggingService.get_instance().error(message)
                raise IndexError(message)
            return False

        self._current_page = page
        if page not in self._loaded_pages:
            self._loaded_pages.add(page)
            self.page_loaded.emit(page)
        return True

    def preload_next_page(self) -> bool:
        """Load the page after the current one if it exists and is not loaded.

        Returns:
            True if a page was loaded.
        """
        next_page = self._current_page + 1
        if next_page < self.total_pages and next_page not in self._loaded_pages:
            return self.load_page(next_page)
        return False

    def visible_data(self) -> List[Any]:
        """Items of every loaded page, in collection order."""
        result: List[Any] = []
        for page in sorted(self._loaded_pages):
            start = page * self.page_size
            result.extend(self._data[start:start + self.page_size])
        return result
