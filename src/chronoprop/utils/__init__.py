"""Small helpers shared across chronoprop."""
