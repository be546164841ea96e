"""
expense_import — bulk expense import with per-row validation and server reconciliation.

Entry point: ``expense_import.controllers.import_session.ImportSession``.
Applications call ``expense_import.utilities.configure_logging()`` once at
startup to install the console and rotating-file handlers.
"""

__version__ = "0.1.0"
