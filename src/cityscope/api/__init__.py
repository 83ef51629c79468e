"""HTTP API for Cityscope."""
