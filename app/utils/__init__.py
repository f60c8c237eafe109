"""
Utilities Package

This package contains helper functions used across the application.

- http.py: Translate service results into HTTP responses
"""
