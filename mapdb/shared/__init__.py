"""Shared layer: errors, structured logging and codecs used by every other layer."""
