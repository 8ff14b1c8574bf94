"""
taskbell: scheduled tasks with a single shared alarm.

Subpackages:
- tasks/: Task model, TaskStore, AlarmScheduler
- audio/: AlarmPlayer and the sounddevice output
- storage/: durable key-value store
- connectors/: console front end (notification presenter + REPL)
- cli/: composition root, slash commands, entry point
"""

__version__ = "0.1.0"
