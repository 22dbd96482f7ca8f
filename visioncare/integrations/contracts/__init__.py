"""
Contracts (data models).

This folder defines the shapes exchanged with the table source:
- Record: one normalized spreadsheet row
- FetchError: the single failure type raised by table clients

Both the local and the real HTTP clients return these contracts, so catalog
stores and the renderer never depend on the raw grid format.
"""
