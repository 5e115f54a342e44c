"""Pytest configuration and shared fixtures."""

import os

from hypothesis import settings

if "LEAN_IMT_FIELD" not in os.environ:
    os.environ["LEAN_IMT_FIELD"] = "bn254"

# Create a profile named "no_deadline" with deadline disabled.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")
