"""End-to-end analysis pipeline."""
