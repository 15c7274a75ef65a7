"""ASGI request handling, response sending, and error pages."""
