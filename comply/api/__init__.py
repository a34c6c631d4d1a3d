"""HTTP routing layer."""
