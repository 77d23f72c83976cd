"""Utility functions for the taskboard server."""
