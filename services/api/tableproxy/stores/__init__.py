"""Data stores for caching.

Stores handle:
- Redis: caching, TTL policies

No business logic in stores - that belongs in services.
"""
