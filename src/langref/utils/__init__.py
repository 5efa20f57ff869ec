"""Internal utilities for langref."""
