"""Presentation layer: HTTP API and schemas."""
