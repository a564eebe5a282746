"""Manifest parsers."""
