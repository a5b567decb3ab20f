"""Workbook input (snapshot reader) and output (styled export)."""
