"""Batch shot-label detection for local video files via Google Cloud Video Intelligence."""

__version__ = "0.1.0"
