# expense_import/controllers/__init__.py
"""
Controllers for the bulk import engine: state transitions, reconciliation,
request tracking, and the default file-parser and batch-endpoint adapters.
"""
