"""
Tally subsystem.

Components:
- tree.py: recursive subtask walker (depth-first, cycle-guarded)
- aggregate.py: total / completed counting
- sync.py: per-project orchestration + multi-project loop
- scheduler.py: recurring trigger around sync_all
"""
