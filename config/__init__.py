"""Top-level package for Django configuration.

This package holds the settings modules for the different environments
and the entry points for WSGI and ASGI.
"""
