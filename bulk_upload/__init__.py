"""Spreadsheet-driven bulk item upload for the e-commerce catalog.

Pipeline: parse the sheet -> group rows into product drafts -> validate ->
upload drafts one by one to the catalog service.
"""

__version__ = "0.1.0"
