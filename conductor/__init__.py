"""Conductor - tool-execution orchestration engine.

Detects tool references in free text, builds prioritized execution plans,
tracks per-session execution state and coordinates human interactions.
"""

__version__ = "0.1.0"
