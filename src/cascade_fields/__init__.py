"""Cascade Fields importer.

Reads cascade field rows from an Excel workbook, maps them onto the 12-field
main/sub/major/minor record, validates them and serializes the result for a
calling process.
"""

__version__ = "0.3.0"
