"""
Domain layer for the summary report job.

This layer contains:
- Data models (arguments, message, result types)
- Argument parsing
- Dispatch pipeline (domains -> report body -> subject -> mail)
"""
