# -*- coding: utf-8 -*-
"""Runtime configuration, read from the environment with local defaults."""
import os
from pathlib import Path

# Directory holding one JSON blob per storage key - configurable via environment variable
PLANNER_DATA_DIR = Path(os.getenv("PLANNER_DATA_DIR", str(Path.home() / ".group_planner")))

# "file" persists between runs, "memory" forgets everything on exit
PLANNER_STORAGE = os.getenv("PLANNER_STORAGE", "file")

PLANNER_LOG_LEVEL = os.getenv("PLANNER_LOG_LEVEL", "INFO")

# Number of events shown by the upcoming events view
PLANNER_UPCOMING_LIMIT = int(os.getenv("PLANNER_UPCOMING_LIMIT", "5"))
