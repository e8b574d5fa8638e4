"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: CRS identifiers, coordinate bounds, unit factors
- exceptions: Custom exception hierarchy
"""
