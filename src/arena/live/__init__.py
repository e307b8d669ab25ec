"""Live polling of the arena asset curve."""

from arena.live.monitor import ArenaMonitor, MonitorStatus

__all__ = [
    "ArenaMonitor",
    "MonitorStatus",
]
