"""Infrastructure layer: database, repositories, graph snapshot, store.

This layer may import from domain (entities and repository contracts).
It must never import from services, commands, or output.
"""
