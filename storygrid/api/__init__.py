"""Storygrid HTTP API."""
