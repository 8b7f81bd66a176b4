"""Bundled CI job templates."""
