"""
Services layer module.

Contains the rename engine and the recognition engine.
"""
