"""Shared GeoJSON helpers."""
