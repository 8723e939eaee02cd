"""OpenMotion - personal task planner with auto-scheduling and .ics export."""

__version__ = "0.1.0"
