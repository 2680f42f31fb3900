"""Record lifecycle orchestration."""
from supportlog.lifecycle.controller import Banner, MemoryClipboard, RecordLifecycleController

__all__ = ["Banner", "MemoryClipboard", "RecordLifecycleController"]
