"""Adapters - I/O implementations of ports."""

from .json_store import JsonTaskStore
from .debounced_store import DebouncedTaskStore

__all__ = [
    "JsonTaskStore",
    "DebouncedTaskStore",
]
