"""Manifest validators."""
