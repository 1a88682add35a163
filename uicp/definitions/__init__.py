"""Component definitions - the schema registry describing known components.

A definitions document lists every component uid with its input schema.
Documents are loaded from inline objects, URLs or local files and cached
with a TTL.
"""
