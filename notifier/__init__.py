"""Scheduled multi-channel notification service."""
