"""Render timing and memory monitor."""

import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, List, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from orae.services.logging_service import LoggingService

# Try to import psutil for memory sampling (optional dependency)
try:
    import psutil
    PSUTIL_AVAILABLE = True
except ImportError:
    PSUTIL_AVAILABLE = False
    psutil = None


SUGGESTION_SLOW_RENDER = "Rendering is slow. Consider virtual scrolling for long move lists."
SUGGESTION_FRAME_DROPS = "Frame drops detected. Simplify animations."
SUGGESTION_HIGH_MEMORY = "Memory usage is high. Clear the replay caches."
SUGGESTION_OPTIMIZED = "Performance is optimized."


@dataclass(frozen=True)
class MemoryUsage:
    """A memory sample in MB."""
    used_mb: float
    limit_mb: float


MemoryProbe = Callable[[], Optional[MemoryUsage]]


def psutil_memory_probe() -> Optional[MemoryUsage]:
    """Resident memory of this process against total system memory.

    Returns:
        MemoryUsage, or None if psutil is unavailable or fails.
    """
    if not PSUTIL_AVAILABLE:
        return None
    try:
        used = psutil.Process().memory_info().rss
        limit = psutil.virtual_memory().total
    except (psutil.Error, OSError):
        return None
    return MemoryUsage(used / 1048576, limit / 1048576)


class PerformanceMonitor(QObject):
    """Keeps a sliding window of render times and samples memory periodically.

    The sampling timer must be stopped with stop_sampling() on teardown.
    """

    metrics_changed = pyqtSignal(float, int)  # average render time (ms), frame drops
    memory_sampled = pyqtSignal(float, float)  # used MB, limit MB

    def __init__(self, config: Dict[str, Any], memory_probe: Optional[MemoryProbe] = None) -> None:
        """Initialize the performance monitor.

        Args:
            config: Configuration dictionary.
            memory_probe: Callable returning a MemoryUsage or None. Defaults to psutil.
        """
        super().__init__()
        perf_config = config.get('performance', {})
        self.max_samples = perf_config.get('max_samples', 60)
        self.frame_budget_ms = perf_config.get('frame_budget_ms', 16.67)
        self.slow_render_ms = perf_config.get('slow_render_ms', 16.0)
        self.frame_drop_warning = perf_config.get('frame_drop_warning', 5)
        self.memory_warning_ratio = perf_config.get('memory_warning_ratio', 0.8)
        self.sampling_interval_ms = perf_config.get('sampling_interval_ms', 1000)

        self._memory_probe: MemoryProbe = memory_probe or psutil_memory_probe
        self._samples: Deque[float] = deque(maxlen=self.max_samples)
        self._start: Optional[float] = None
        self._last_memory: Optional[MemoryUsage] = None

        self._sampling_timer = QTimer()
        self._sampling_timer.setInterval(self.sampling_interval_ms)
        self._sampling_timer.timeout.connect(self.sample_memory)

    def start_timing(self) -> None:
        """Mark the start of a unit of rendering work."""
        self._start = time.perf_counter()

    def end_timing(self) -> Optional[float]:
        """Mark the end of rendering work and record the elapsed time.

        Returns:
            Elapsed milliseconds, or None if start_timing() was not called.
        """
        if self._start is None:
            return None
        elapsed_ms = (time.perf_counter() - self._start) * 1000
        self._start = None
        self.record_sample(elapsed_ms)
        return elapsed_ms

    def record_sample(self, elapsed_ms: float) -> None:
        """Add a render time to the window, dropping the oldest beyond the limit."""
        self._samples.append(elapsed_ms)
        self.metrics_changed.emit(self.average_render_time, self.frame_drop_count)

    @property
    def samples(self) -> List[float]:
        return list(self._samples)

    @property
    def average_render_time(self) -> float:
        """Mean of the samples in the window (0 when empty)."""
        if not self._samples:
            return 0.0
        return sum(self._samples) / len(self._samples)

    @property
    def frame_drop_count(self) -> int:
        """Number of samples over the frame budget."""
        return sum(1 for sample in self._samples if sample > self.frame_budget_ms)

    def sample_memory(self) -> Optional[MemoryUsage]:
        """Take a memory sample. Failures leave the previous sample in place."""
        usage = self._memory_probe()
        if usage is not None:
            self._last_memory = usage
            self.memory_sampled.emit(usage.used_mb, usage.limit_mb)
        return usage

    def suggestions(self) -> List[str]:
        """Performance hints for the current window.

        Returns:
            At least one message. The affirmative message appears only when no
            warning applies.
        """
        suggestions: List[str] = []
        if self.average_render_time > self.slow_render_ms:
            suggestions.append(SUGGESTION_SLOW_RENDER)
        if self.frame_drop_count > self.frame_drop_warning:
            suggestions.append(SUGGESTION_FRAME_DROPS)

        memory = self.sample_memory()
        if memory is not None and memory.used_mb > memory.limit_mb * self.memory_warning_ratio:
            suggestions.append(SUGGESTION_HIGH_MEMORY)

        if not suggestions:
            suggestions.append(SUGGESTION_OPTIMIZED)
        return suggestions

    def start_sampling(self) -> None:
        """Start periodic memory sampling."""
        if not self._sampling_timer.isActive():
            self._sampling_timer.start()
            LoggingService.get_instance().debug("Performance sampling started")

    def stop_sampling(self) -> None:
        """Stop periodic memory sampling."""
        if self._sampling_timer.isActive():
            self._sampling_timer.stop()
            LoggingService.get_instance().debug("Performance sampling stopped")

    @property
    def is_sampling(self) -> bool:
        return self._sampling_timer.isActive()

    def reset(self) -> None:
        """Drop every sample."""
        self._samples.clear()
        self._start = None
        self._last_memory = None
