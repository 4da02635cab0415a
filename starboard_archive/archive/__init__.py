"""Starboard Archive pipeline.

This package walks a Discord starboard channel and archives every starred
message: its text, its media, and a resumable JSON snapshot of the records.

Usage:
    python -m starboard_archive.archive                  # Settings from env / .env
    python -m starboard_archive.archive --config X.json  # Settings from a JSON file
"""
