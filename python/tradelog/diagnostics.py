# Runtime snapshots attached to debug log entries.
# Memory figures come from psutil, GC figures from the gc module plus a pause
# monitor hooked into gc.callbacks, build metadata from importlib.metadata.

from __future__ import annotations
import gc, platform, sys, time
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from importlib import metadata
from typing import Any, Dict, List, Optional, Sequence, Tuple

import psutil

try:
    import resource
except ImportError:  # Windows
    resource = None

PAUSE_HISTORY = 256
QUANTILES = 5


@dataclass(frozen=True)
class MemoryStats:
    alloc: int
    total_alloc: int
    heap_alloc: int
    heap_sys: int
    heap_idle: int
    heap_inuse: int
    heap_released: int
    heap_objects: int
    stack_inuse: int
    stack_sys: int
    num_gc: int

    def entries(self) -> List[str]:
        return [
            f"Alloc: {self.alloc} bytes",
            f"TotalAlloc: {self.total_alloc} bytes",
            f"HeapAlloc: {self.heap_alloc} bytes",
            f"HeapSys: {self.heap_sys} bytes",
            f"HeapIdle: {self.heap_idle} bytes",
            f"HeapInuse: {self.heap_inuse} bytes",
            f"HeapReleased: {self.heap_released} bytes",
            f"HeapObjects: {self.heap_objects}",
            f"StackInUse: {self.stack_inuse} bytes",
            f"StackSys: {self.stack_sys} bytes",
            f"NumGC: {self.num_gc}",
        ]


@dataclass(frozen=True)
class GCStats:
    last_gc: Optional[datetime]
    num_gc: int
    pause_total: timedelta
    pause: Optional[timedelta]
    pause_end: Optional[datetime]
    pause_quantiles: Tuple[timedelta, ...]

    def entries(self) -> List[str]:
        quantiles = ", ".join(str(q) for q in self.pause_quantiles)
        return [
            f"LastGC: {_when(self.last_gc)}",
            f"NumGC: {self.num_gc}",
            f"PauseTotal: {self.pause_total}",
            f"Pause: {self.pause if self.pause is not None else 'none'}",
            f"PauseEnd: {_when(self.pause_end)}",
            f"PauseQuantiles: [{quantiles}]",
        ]


@dataclass(frozen=True)
class BuildInfo:
    name: str
    version: str
    requires: Tuple[str, ...]
    python: str = platform.python_version()
    implementation: str = platform.python_implementation()
    compiler: str = platform.python_compiler()
    build: str = " ".join(platform.python_build())
    system: str = platform.platform()

    def __str__(self) -> str:
        lines = [
            f"python\t{self.python} ({self.implementation})",
            f"compiler\t{self.compiler}",
            f"build\t{self.build}",
            f"platform\t{self.system}",
            f"dist\t{self.name}\t{self.version}",
        ]
        lines.extend(f"dep\t{req}" for req in self.requires)
        return "\n".join(lines)


def _when(ts: Optional[datetime]) -> str:
    return ts.isoformat() if ts is not None else "never"


def pause_quantiles(pauses: Sequence[float], n: int = QUANTILES) -> Tuple[float, ...]:
    """Return min, evenly spaced quantiles and max of ``pauses`` (``n`` values)."""
    if not pauses:
        return ()
    ordered = sorted(pauses)
    last = n - 1
    picks = [ordered[len(ordered) * i // last] for i in range(last)]
    picks.append(ordered[-1])
    return tuple(picks)


class GCMonitor:
    """Records collector pause durations through ``gc.callbacks``.

    The interpreter does not keep pause history itself, so pauses are only
    known from the moment the monitor is installed.
    """

    def __init__(self, history: int = PAUSE_HISTORY) -> None:
        self._pauses: deque = deque(maxlen=history)
        self._pause_total = 0.0
        self._started: Optional[float] = None

    def _on_gc(self, phase: str, info: Dict[str, Any]) -> None:
        if phase == "start":
            self._started = time.perf_counter()
        elif phase == "stop" and self._started is not None:
            pause = time.perf_counter() - self._started
            self._started = None
            self._pause_total += pause
            self._pauses.append((pause, time.time()))

    @property
    def installed(self) -> bool:
        return self._on_gc in gc.callbacks

    def install(self) -> None:
        if not self.installed:
            gc.callbacks.append(self._on_gc)

    def uninstall(self) -> None:
        if self.installed:
            gc.callbacks.remove(self._on_gc)

    def reset(self) -> None:
        self._pauses.clear()
        self._pause_total = 0.0
        self._started = None

    def snapshot(self) -> GCStats:
        # deque.copy does not allocate tracked objects mid-iteration, so a
        # collection cannot mutate the history while it is being copied
        pauses = self._pauses.copy()
        num_gc = sum(s["collections"] for s in gc.get_stats())
        if not pauses:
            return GCStats(None, num_gc, timedelta(seconds=self._pause_total), None, None, ())
        last_pause, last_end = pauses[-1]
        end = datetime.fromtimestamp(last_end, tz=timezone.utc)
        return GCStats(
            last_gc=end,
            num_gc=num_gc,
            pause_total=timedelta(seconds=self._pause_total),
            pause=timedelta(seconds=last_pause),
            pause_end=end,
            pause_quantiles=tuple(timedelta(seconds=q) for q in pause_quantiles([p for p, _ in pauses])),
        )


gc_monitor = GCMonitor()


def read_gc_stats(monitor: Optional[GCMonitor] = None) -> GCStats:
    return (monitor or gc_monitor).snapshot()


def _peak_resident(info: Any) -> int:
    peak = getattr(info, "peak_wset", None)
    if peak is not None:
        return peak
    if resource is None:
        return info.rss
    maxrss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # ru_maxrss is bytes on macOS, KiB elsewhere
    return maxrss if sys.platform == "darwin" else maxrss * 1024


def _stack_limit() -> int:
    if resource is None:
        return 0
    soft, _ = resource.getrlimit(resource.RLIMIT_STACK)
    return 0 if soft == resource.RLIM_INFINITY else soft


def _stack_resident(process: psutil.Process) -> int:
    memory_maps = getattr(process, "memory_maps", None)
    if memory_maps is None:
        return 0
    try:
        maps = memory_maps(grouped=True)
    except (psutil.Error, NotImplementedError, OSError):
        return 0
    return sum(m.rss for m in maps if m.path == "[stack]")


def read_memory_stats() -> MemoryStats:
    """Take a snapshot of process memory; unsupported figures read as 0."""
    process = psutil.Process()
    info = process.memory_info()
    try:
        full = process.memory_full_info()
    except (psutil.Error, NotImplementedError, OSError):
        full = None
    return MemoryStats(
        alloc=info.rss,
        total_alloc=_peak_resident(info),
        heap_alloc=getattr(info, "data", info.rss),
        heap_sys=info.vms,
        heap_idle=max(info.vms - info.rss, 0),
        heap_inuse=getattr(full, "uss", 0),
        heap_released=getattr(full, "swap", 0),
        heap_objects=sys.getallocatedblocks(),
        stack_inuse=_stack_resident(process),
        stack_sys=_stack_limit(),
        num_gc=sum(s["collections"] for s in gc.get_stats()),
    )


def read_build_info(distribution: Optional[str]) -> Optional[BuildInfo]:
    """Metadata of an installed distribution, or None when it is not installed."""
    if not distribution:
        return None
    try:
        dist = metadata.distribution(distribution)
    except metadata.PackageNotFoundError:
        return None
    return BuildInfo(
        name=dist.metadata["Name"] or distribution,
        version=dist.version,
        requires=tuple(dist.requires or ()),
    )
