"""Domain apps of the coworking booking service."""
