# config_local.example.py

"""
Example local overrides.

Usage:
  1) Copy this file to `config_local.py`
  2) Adjust values for your workspace
  3) Never commit `config_local.py` (it is gitignored)

Prefer `.env` for secrets. This file should contain only the project registry.
When PROJECTS is defined here it replaces TALLY_PROJECTS.
"""

# Each project writes timestamp / total / completed to columns A / C / D of its row.
# PROJECTS = [
#     {"project_gid": "1201234567890", "sheet_name": "Progress", "row": 4, "name": "Website"},
#     {"project_gid": "1209876543210", "sheet_name": "Progress", "row": 5, "name": "Mobile app"},
# ]
