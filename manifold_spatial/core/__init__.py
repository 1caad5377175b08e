"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Manifold SQL fragments, column markers, alias alphabet
- exceptions: Extraction exception hierarchy
"""
