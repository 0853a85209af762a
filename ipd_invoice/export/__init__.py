"""Invoice PDF and spreadsheet exports."""
