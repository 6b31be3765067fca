"""
Result sinks.

Components:
- sheets.py: Google Sheets writer (gspread, service account)
- console.py: stdout printer for dry runs
"""
