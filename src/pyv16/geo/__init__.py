"""Projection and clustering over the slippy-map pixel space."""
