"""Service layer: the graph façade, element handles, and index management."""
