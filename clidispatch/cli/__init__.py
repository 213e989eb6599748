"""Console entry point for clidispatch."""
