"""Core types, contracts and errors for record duplication."""
