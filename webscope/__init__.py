"""WebScope application entry point."""
