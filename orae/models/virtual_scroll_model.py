"""Virtual scrolling window over a long item list."""

import math
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Sequence, TypeVar

from PyQt6.QtCore import QObject, pyqtSignal


T = TypeVar("T")


@dataclass(frozen=True)
class VisibleRange:
    """Inclusive index range of materialized items.

    An empty collection gives start 0 and end -1.
    """
    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    def __len__(self) -> int:
        return max(0, self.end - self.start + 1)


@dataclass(frozen=True)
class VisibleItem(Generic[T]):
    """An item inside the visible range with its layout position."""
    index: int  # index in the full collection
    item: T
    offset_top: int  # pixels from the top of the list


def compute_visible_range(scroll_top: float, container_height: float, item_height: float,
                          overscan: int, item_count: int) -> VisibleRange:
    """Compute which items a scroll position needs.

    Args:
        scroll_top: Scroll offset in pixels.
        container_height: Viewport height in pixels.
        item_height: Fixed row height in pixels.
        overscan: Extra rows materialized above and below the viewport.
        item_count: Number of items in the collection.

    Returns:
        VisibleRange with both bounds inside [0, item_count - 1].

    Raises:
        ValueError: If item_height is not positive.
    """
    if item_height <= 0:
        raise ValueError(f"Item height must be positive, got {item_height}")
    if item_count <= 0:
        return VisibleRange(0, -1)

    last = item_count - 1
    start = math.floor(scroll_top / item_height) - overscan
    end = math.ceil((scroll_top + container_height) / item_height) + overscan
    start = min(max(0, start), last)
    end = min(max(start, end), last)
    return VisibleRange(start, end)


class VirtualScrollModel(QObject):
    """Model holding the scroll state of a virtualized list.

    Emits visible_range_changed only when the materialized range moves.
    """

    visible_range_changed = pyqtSignal(int, int)  # start, end (inclusive)

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize the virtual scroll model.

        Args:
            config: Configuration dictionary.
        """
        super().__init__()
        windowing = config.get('windowing', {})
        self._item_height: int = windowing.get('item_height', 40)
        self._container_height: int = windowing.get('container_height', 400)
        self._overscan: int = windowing.get('overscan', 5)
        self._scroll_top: float = 0.0
        self._item_count: int = 0
        self._range = self._compute()

    def _compute(self) -> VisibleRange:
        return compute_visible_range(self._scroll_top, self._container_height, self._item_height,
                                     self._overscan, self._item_count)

    def _update(self) -> None:
        new_range = self._compute()
        if new_range != self._range:
            self._range = new_range
            self.visible_range_changed.emit(new_range.start, new_range.end)

    @property
    def visible_range(self) -> VisibleRange:
        return self._range

    @property
    def scroll_top(self) -> float:
        return self._scroll_top

    @scroll_top.setter
    def scroll_top(self, value: float) -> None:
        self._scroll_top = max(0.0, value)
        self._update()

    @property
    def container_height(self) -> int:
        return self._container_height

    @container_height.setter
    def container_height(self, value: int) -> None:
        self._container_height = max(0, value)
        self._update()

    @property
    def item_count(self) -> int:
        return self._item_count

    @item_count.setter
    def item_count(self, value: int) -> None:
        self._item_count = max(0, value)
        self._update()

    @property
    def item_height(self) -> int:
        return self._item_height

    @property
    def total_height(self) -> int:
        """Height of the full list in pixels."""
        return self._item_count * self._item_height

    def visible_items(self, items: Sequence[T]) -> List[VisibleItem[T]]:
        """Materialize the items of the current range.

        Args:
            items: Full collection (its length should match item_count).

        Returns:
            Items in the visible range, in collection order.
        """
        visible_range = compute_visible_range(self._scroll_top, self._container_height,
                                              self._item_height, self._overscan, len(items))
        return [
            VisibleItem(index, items[index], index * self._item_height)
            for index in range(visible_range.start, visible_range.end + 1)
        ]
