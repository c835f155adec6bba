"""Data models shared across the coverage runner."""
