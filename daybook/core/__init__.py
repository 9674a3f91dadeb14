"""Shared core utilities: exceptions, logging, paths, validation and calendar helpers."""
