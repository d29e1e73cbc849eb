"""
Data access layer.

Design rules:
- Views call ONLY functions in data.service.
- Every live read (Databricks SQL or local CSV) falls back to mock data on failure.
- SQL (queries.py) and pandas (analysis.py) implement the same semantics.
- No env var reads here (config-only).
"""
