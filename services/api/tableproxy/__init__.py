"""Table Proxy - cached read-only proxy in front of an Airtable table."""
