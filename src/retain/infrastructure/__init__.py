# Infrastructure Package
from .json_store import JsonItemStore
from .memory_store import InMemoryItemStore
from .sinks import NullSoundSink

__all__ = ["InMemoryItemStore", "JsonItemStore", "NullSoundSink"]
