"""Shared utilities - errors and diagnostics."""
