"""Tests for virtual scrolling and pagination."""

import pytest

from orae.models.pagination_model import PaginationModel
from orae.models.virtual_scroll_model import VirtualScrollModel, compute_visible_range


def test_visible_range_at_top():
    visible = compute_visible_range(0, 400, 40, 5, 100)
    assert (visible.start, visible.end) == (0, 15)


def test_visible_range_mid_scroll():
    visible = compute_visible_range(1000, 400, 40, 5, 100)
    assert (visible.start, visible.end) == (20, 40)


def test_visible_range_clamped_at_bottom():
    visible = compute_visible_range(3900, 400, 40, 5, 100)
    assert (visible.start, visible.end) == (92, 99)


@pytest.mark.parametrize("scroll_top", [-500, -1, 0, 17, 399, 1234, 4000, 100000])
@pytest.mark.parametrize("item_count", [1, 3, 10, 101])
@pytest.mark.parametrize("overscan", [0, 5, 1000])
def test_visible_range_bounds(scroll_top, item_count, overscan):
    visible = compute_visible_range(scroll_top, 400, 40, overscan, item_count)

    assert 0 <= visible.start <= item_count - 1
    assert 0 <= visible.end <= item_count - 1
    assert visible.start <= visible.end


def test_empty_collection_gives_empty_range():
    visible = compute_visible_range(200, 400, 40, 5, 0)

    assert visible.is_empty
    assert len(visible) == 0


def test_invalid_item_height():
    with pytest.raises(ValueError):
        compute_visible_range(0, 400, 0, 5, 10)


def test_scroll_model_materializes_only_visible_items(config):
    model = VirtualScrollModel(config)
    items = list(range(200))
    model.item_count = len(items)
    changes = []
    model.visible_range_changed.connect(lambda start, end: changes.append((start, end)))

    model.scroll_top = 2000
    visible = model.visible_items(items)

    assert changes == [(45, 65)]
    assert [item.index for item in visible] == list(range(45, 66))
    assert visible[0].offset_top == 45 * 40
    assert model.total_height == 200 * 40


def test_scroll_model_does_not_emit_when_range_is_unchanged(config):
    model = VirtualScrollModel(config)
    model.item_count = 100
    model.scroll_top = 1010
    changes = []
    model.visible_range_changed.connect(lambda start, end: changes.append((start, end)))

    model.scroll_top = 1020
    model.scroll_top = 1030

    assert changes == []
    assert (model.visible_range.start, model.visible_range.end) == (20, 41)


def test_pagination_starts_with_first_page(config):
    model = PaginationModel(config)
    model.set_data(list(range(120)))

    assert model.total_pages == 3
    assert model.loaded_pages == [0]
    assert model.visible_data() == list(range(50))


def test_pagination_preload_next(config):
    model = PaginationModel(config)
    model.set_data(list(range(120)))

    assert model.preload_next_page()
    assert model.current_page == 1
    assert model.preload_next_page()
    assert not model.preload_next_page()
    assert model.visible_data() == list(range(120))


def test_visible_data_keeps_collection_order(config):
    model = PaginationModel(config)
    model.set_data(list(range(120)))

    model.load_page(2)
    model.load_page(1)

    assert model.visible_data() == list(range(120))


def test_out_of_range_page_is_a_no_op(config):
    model = PaginationModel(config)
    model.set_data(list(range(60)))

    assert not model.load_page(2)
    assert not model.load_page(-1)
    assert model.loaded_pages == [0]
    assert model.current_page == 0


def test_strict_out_of_range_page_raises(config):
    model = PaginationModel(config)
    model.set_data(list(range(60)))

    with pytest.raises(IndexError):
        model.load_page(5, strict=True)


def test_set_data_resets_pages(config):
    model = PaginationModel(config)
    model.set_data(list(range(120)))
    model.load_page(2)

    model.set_data(list(range(10)))

    assert model.loaded_pages == [0]
    assert model.visible_data() == list(range(10))
