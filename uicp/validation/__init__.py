"""Block validation against component definitions."""
