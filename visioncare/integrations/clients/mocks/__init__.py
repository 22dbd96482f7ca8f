"""
Local (development) table clients.

Used when Google Sheets credentials are not configured, so the site can run
against the sample grids in config/sample_catalog.yml.
"""
