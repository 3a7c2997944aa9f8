"""Decision module - triage categories and report rendering."""
