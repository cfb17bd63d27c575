"""Packaged keyword tables (YAML)."""
