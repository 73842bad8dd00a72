"""Domain layer: element kinds, cell encoding, IDs, and the error taxonomy.

This layer depends only on the standard library.
It must never import from services, infrastructure, commands, or config.
"""
