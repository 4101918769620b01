"""HTTP API for the project comparison service."""
