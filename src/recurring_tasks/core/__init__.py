"""Core contracts shared by the batch and interactive paths (ports, errors, state)."""
