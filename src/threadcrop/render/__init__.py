"""Orientation normalisation and crop rasterisation."""
