"""Exports: CSV tables and Markdown summaries of aggregation output.

- writers.py: CSV emitters with fixed column schemas
- reports.py: summary and leaderboard Markdown
"""
