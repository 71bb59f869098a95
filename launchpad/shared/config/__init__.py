"""Packaged YAML settings."""
