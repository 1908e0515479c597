"""
Task subsystem.

Components:
- task_models.py: data structures (TaskRecord, TaskList, NewTaskSpec, TaskStatus)
- notes_codec.py: recurrence metadata embedded in the notes field
- recurrence.py: eligibility filter + next-occurrence planner
- task_scheduler.py: batch scanner and optional polling loop
- google_tasks.py: HTTP store client (Google Tasks REST API)
- task_api.py: interactive helpers (one task at a time)
"""
