"""
HTTP layer: routers and their request handlers.
"""
