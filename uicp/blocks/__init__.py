"""Component blocks - structured instructions embedded in text.

A block is a fenced region (```uicp ... ```) holding a JSON payload with
a component uid and its data.
"""
