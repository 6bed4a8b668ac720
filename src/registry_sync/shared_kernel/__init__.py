"""Shared kernel: contracts used across bounded contexts."""
