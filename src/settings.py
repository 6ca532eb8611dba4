"""Static paths and environment overrides for potawatch.

All user-editable settings (filters, channels, speech, polling, logging) live
in a single JSON file so they can be edited by hand or through the config
panel without touching Python.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# config.json sits at the project root unless POTAWATCH_CONFIG points elsewhere.
CONFIG_PATH = Path(os.getenv("POTAWATCH_CONFIG") or PROJECT_ROOT / "config.json")

# Relative log file paths are resolved against the project root.
DEFAULT_LOG_PATH = "logs/potawatch.log"

# Upper bound on identities remembered for novelty detection.
NOVELTY_CAPACITY = 1000
