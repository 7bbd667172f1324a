"""
Sheets Migrator - Source Package

Imports the revenue, expense and salary sheets of the dashboard's Google
Sheets workbook into the dashboard database.

DESIGN PRINCIPLES:
1. Every run is a full pass over the current sheet contents
2. Reruns are safe: rows already in the database are skipped
3. One bad row never aborts the batch
4. Only configuration problems are fatal
5. Source and storage are swappable ports
"""

__version__ = "1.0.0"
__author__ = "Dashboard Team"
