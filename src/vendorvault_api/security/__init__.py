"""Security utilities package."""
