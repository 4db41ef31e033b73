"""CLI surface: typer entry point, renderer, and live feed."""
