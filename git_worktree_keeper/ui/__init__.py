"""Rendering of the application state into terminal frames."""
