"""
Recurring tasks on top of a task-list service that has no recurrence of its own.

A task opts in by carrying a small JSON object in its notes, e.g. {"interval": 7}.
A periodic scan finds completed tasks with such notes, creates the next occurrence
and marks the original as processed.
"""

__version__ = "0.1.0"
