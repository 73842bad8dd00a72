"""Infrastructure layer: backing store, table wrappers, writer, cache.

This layer depends on stdlib, the domain layer, and SQLAlchemy.
It must never import from services, commands, or output.
"""
