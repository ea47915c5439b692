"""
Task subsystem.

Components:
- task_models.py: data structures (Task, HistoryEntry, enums, TaskQuery)
- task_errors.py: business-rule failures with stable codes
- task_rules.py: field validation + DD/MM/YYYY / HH:MM parsing
- task_store.py: in-memory and SQLite-backed storage behind one repository contract
- task_history.py: append-only audit log (recording, field diffs, filtered reads)
- task_lifecycle.py: status transition rules and due-moment helpers
- task_query.py: filter / search / sort pipeline
- task_service.py: the mutation entry points and the overdue sweep
- task_api.py: request-level parsing and checks used by connectors
"""
