"""Duplication pipeline: field filtering, overrides and the engine."""
