"""
Application layer.

Service orchestration between the HTTP API and the core/boundary layers.
"""
