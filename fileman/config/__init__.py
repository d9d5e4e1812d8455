"""Ambient configuration: logging, settings, exceptions."""
