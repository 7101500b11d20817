"""Faceted search core: filter encoding, merging and search orchestration."""
