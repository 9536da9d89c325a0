"""Domain layer: entities, enums, derivation rules, repository contracts.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
