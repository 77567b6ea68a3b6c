"""
API package containing versioned routes and shared dependencies.

A version subpackage exposes a top-level ``router`` which includes all of
its domain-specific endpoints.
"""
