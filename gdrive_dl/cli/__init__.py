"""
Command-line layer: the Typer app, Rich formatters, and progress output.
"""
