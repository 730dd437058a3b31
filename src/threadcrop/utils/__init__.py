"""Utility helpers shared across threadcrop."""
