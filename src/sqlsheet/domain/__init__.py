"""Domain layer — document models and markup structure.

This layer depends only on stdlib, pydantic, markupsafe and ruamel.yaml.
It must never import from services, infrastructure, commands, or config.
"""
