"""Pixmart marketplace backend."""
