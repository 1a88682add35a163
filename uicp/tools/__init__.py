"""LLM tool helpers - component discovery and block creation.

Framework-agnostic functions an LLM can call (via tool use) to find out
which components exist and to produce well-formed blocks for them.
"""
