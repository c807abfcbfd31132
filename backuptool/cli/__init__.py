"""backup-tool CLI — Typer-based command-line interface.

All operator-facing output uses Rich for formatted terminal display.
"""
