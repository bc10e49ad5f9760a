"""
Command-line interface: the Typer application and Rich output helpers.
"""
