"""Bundled JSON Schemas, loaded with importlib.resources."""
