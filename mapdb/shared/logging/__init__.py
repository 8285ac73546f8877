"""Logging helpers shared across layers."""
