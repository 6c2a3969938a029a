"""Business logic for Talent Radar, one module per feature area."""
