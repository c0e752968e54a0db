"""Data transfer objects package."""
