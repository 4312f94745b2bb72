"""HTTP API for the corsgate demo application."""
