"""
Real HTTP integration clients.

These clients talk to the Google Sheets values API over HTTPS.

Important:
- Must implement the same fetch(table_name) contract as the local client
- Must return Records shaped according to visioncare/integrations/contracts/records.py

Switching:
The selection of local vs real clients should happen in visioncare/api/main.py only.
"""
