"""Parsing pipeline - text in, ordered text/component segments out."""
