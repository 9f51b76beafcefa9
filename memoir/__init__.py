"""
Memoir - Source Package

Persistence core for a two-person journal (memories, moods, to-dos,
a shared vault, songs and photos).

DESIGN PRINCIPLES:
1. Local writes always land first
2. The remote tier is best effort and may be missing entirely
3. Corrupt local data is purged, never returned
4. Persistence failures are logged, not raised
"""

__version__ = "1.0.0"
__author__ = "Memoir Team"
