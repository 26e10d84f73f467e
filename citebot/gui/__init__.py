"""Web view."""
