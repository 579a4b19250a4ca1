"""Domain layer — units, timestamps, and constraint configuration.

This layer depends only on stdlib, dateutil and pydantic.
It must never import from services, config, commands, or output.
"""
