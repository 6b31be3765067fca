"""
Core types shared by every subsystem.

Components:
- models.py: value types (TaskRecord, TaskCounts, ProjectConfig, SyncResult)
- ports.py: Protocols for the upstream source and the result sink
"""
