"""Versioned data contracts (JSON Schema) for exported artifacts."""
