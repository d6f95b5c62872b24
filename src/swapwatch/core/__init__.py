"""Core data models, configuration, and ports.

This package provides:
- Data models (RawLog, SwapRecord)
- Configuration classes (StreamConfig, Settings)
- Ports (ILogSource, IRecordStore)
"""

from swapwatch.core.config import Settings, StreamConfig
from swapwatch.core.interfaces import ILogSource, IRecordStore
from swapwatch.core.models import RawLog, SwapRecord

__all__ = [
    "Settings",
    "StreamConfig",
    "ILogSource",
    "IRecordStore",
    "RawLog",
    "SwapRecord",
]
