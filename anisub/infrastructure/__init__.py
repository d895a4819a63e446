"""
Infrastructure layer module.

Contains adapters for the LLM endpoint, the metadata service and the
local file system.
"""
