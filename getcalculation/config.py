"""
Runtime configuration for getcalculation.

Values are module constants; a few can be overridden through environment
variables so the CLI and embedding services share one place to look.
"""
from __future__ import annotations

import os

# ── registry ──────────────────────────────────────────────────────────────────
CALCULATORS_PACKAGE = os.environ.get(
    "GETCALC_CALCULATORS_PACKAGE", "getcalculation.calculators"
)

# Load every strategy at startup instead of on first use.
EAGER_LOAD = os.environ.get("GETCALC_EAGER_LOAD", "1").lower() not in ("0", "false", "no")

# Module names containing any of these are never registered as calculators.
SCAN_SKIP_MARKERS = ("base", "util", "registry")

# ── logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("GETCALC_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# ── numeric defaults ──────────────────────────────────────────────────────────
DEFAULT_PRECISION = 6       # geometry / general outputs
CURRENCY_PRECISION = 2      # money-like outputs
WORDS_PRECISION = 2         # "approximately N" renderings
