"""Scheduled jobs for license expiry and payment dues."""
