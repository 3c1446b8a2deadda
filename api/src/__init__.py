"""Catalog API service.

User registration and login with argon2 credential hashing, an item
catalog, and read-through TTL caching in front of MongoDB.
"""

__version__ = "1.0.0"
