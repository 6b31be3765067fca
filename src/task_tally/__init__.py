"""
task_tally: sync Asana task-completion counts into Google Sheets.

For each registered project the full task tree (top-level tasks and every
nested subtask) is fetched, counted, and written as
(timestamp, total, completed) to a fixed spreadsheet row.
"""

__version__ = "0.1.0"
