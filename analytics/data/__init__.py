"""Price series validation and normalization."""
