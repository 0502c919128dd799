"""HTTP API for the treasury dashboard."""
