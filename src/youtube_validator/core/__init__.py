"""URL patterns, normalization, error taxonomy and video lookups."""
