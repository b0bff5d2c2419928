"""Rich rendering of segmented elements."""
