"""
anisub - episode-aligned subtitle renaming.

Pairs videos and subtitles by an episode key extracted with a configurable
regular expression, renames subtitles after their videos, and recognizes
series metadata with an LLM classifier plus the Bangumi catalogue.
"""

__version__ = '0.1.0'
