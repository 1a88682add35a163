"""Component registry - maps component uids to renderers.

Renderers are registered up front by the host, or loaded on demand from
the component path declared in the definitions document.
"""
