"""Editors that write media to disk."""
