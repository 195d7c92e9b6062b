"""Shared kernel: domain base types and infrastructure (config, logging, errors)."""
