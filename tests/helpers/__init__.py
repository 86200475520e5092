"""Shared helpers for the fsmkit test suite."""
