"""Vision Care Centre website: spreadsheet-backed catalog pages."""

__version__ = "1.0.0"
