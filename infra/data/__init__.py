"""Bar loading and caching."""
