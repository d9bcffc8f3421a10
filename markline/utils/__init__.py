"""Configuration and output helpers."""
