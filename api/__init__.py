"""
API package - HTTP layer: routers, dependencies, middleware and error envelopes.
"""
