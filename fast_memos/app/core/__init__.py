"""Configuration, logging, storage, security and error types."""
