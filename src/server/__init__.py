"""HTTP API for langref."""
