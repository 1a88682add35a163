"""UICP - UI component blocks for streamed LLM output.

Extracts ```uicp fenced component blocks from freeform text, validates
them against a versioned definitions document and resolves renderers:
- Definitions (schemas, sources, TTL cache)
- Block extraction and validation
- Component registry and the parsing pipeline
"""

__version__ = "0.1.0"
