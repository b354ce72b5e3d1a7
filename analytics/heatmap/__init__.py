"""Price-density heatmap generation."""
