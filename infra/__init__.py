"""Infrastructure adapters around the analytics core."""
