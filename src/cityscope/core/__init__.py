"""Core configuration, security primitives and domain errors."""
