"""Parsing and lookup over JSON and BibTeX exports."""
