"""HTTP API for Talent Radar."""
