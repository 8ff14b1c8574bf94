"""
Task subsystem.

Components:
- task_models.py: data structures (Task, AlarmPhase) and input validation
- task_codec.py: JSON wire format of the persisted task list
- task_store.py: in-memory task list persisted through a KeyValueStore
- task_scheduler.py: polling scheduler that fires and dismisses alarms
- task_api.py: small high-level helpers used by the front end
"""
