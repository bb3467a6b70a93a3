"""Tests for the performance monitor."""

from orae.services.performance_monitor import (
    SUGGESTION_FRAME_DROPS, SUGGESTION_HIGH_MEMORY, SUGGESTION_OPTIMIZED, SUGGESTION_SLOW_RENDER,
    MemoryUsage, PerformanceMonitor
)


def no_memory():
    return None


def test_window_keeps_last_60_samples(config):
    monitor = PerformanceMonitor(config, memory_probe=no_memory)
    for i in range(70):
        monitor.record_sample(float(i))

    assert len(monitor.samples) == 60
    assert monitor.samples[0] == 10.0
    assert monitor.average_render_time == sum(range(10, 70)) / 60


def test_frame_drops_count_samples_over_budget(config):
    monitor = PerformanceMonitor(config, memory_probe=no_memory)
    for sample in [16.0, 16.67, 16.68, 30.0]:
        monitor.record_sample(sample)

    assert monitor.frame_drop_count == 2


def test_optimized_message_when_nothing_to_report(config):
    monitor = PerformanceMonitor(config, memory_probe=no_memory)
    monitor.record_sample(5.0)

    assert monitor.suggestions() == [SUGGESTION_OPTIMIZED]


def test_suggestions_never_empty_without_samples(config):
    assert PerformanceMonitor(config, memory_probe=no_memory).suggestions() == [SUGGESTION_OPTIMIZED]


def test_slow_render_and_frame_drop_warnings(config):
    monitor = PerformanceMonitor(config, memory_probe=no_memory)
    for _ in range(6):
        monitor.record_sample(20.0)

    suggestions = monitor.suggestions()
    assert SUGGESTION_SLOW_RENDER in suggestions
    assert SUGGESTION_FRAME_DROPS in suggestions
    assert SUGGESTION_OPTIMIZED not in suggestions


def test_frame_drop_warning_needs_more_than_five(config):
    monitor = PerformanceMonitor(config, memory_probe=no_memory)
    for _ in range(5):
        monitor.record_sample(17.0)
    for _ in range(20):
        monitor.record_sample(1.0)

    assert monitor.suggestions() == [SUGGESTION_OPTIMIZED]


def test_memory_warning(config):
    monitor = PerformanceMonitor(config, memory_probe=lambda: MemoryUsage(900.0, 1000.0))
    assert monitor.suggestions() == [SUGGESTION_HIGH_MEMORY]

    relaxed = PerformanceMonitor(config, memory_probe=lambda: MemoryUsage(800.0, 1000.0))
    assert relaxed.suggestions() == [SUGGESTION_OPTIMIZED]


def test_end_timing_without_start(config):
    monitor = PerformanceMonitor(config, memory_probe=no_memory)

    assert monitor.end_timing() is None
    assert monitor.samples == []


def test_timing_records_a_sample(config):
    monitor = PerformanceMonitor(config, memory_probe=no_memory)
    monitor.start_timing()
    elapsed = monitor.end_timing()

    assert elapsed is not None and elapsed >= 0
    assert len(monitor.samples) == 1


def test_sampling_timer_start_and_stop(config):
    monitor = PerformanceMonitor(config, memory_probe=no_memory)
    monitor.start_sampling()
    assert monitor.is_sampling

    monitor.stop_sampling()
    assert not monitor.is_sampling
