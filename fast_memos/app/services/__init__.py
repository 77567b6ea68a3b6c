"""
Service layer.

Each service encapsulates the business logic for one domain and receives
the shared ``Database`` handle in its constructor.  Services return
schema objects and raise the typed errors from ``core.errors``; they know
nothing about HTTP.
"""
