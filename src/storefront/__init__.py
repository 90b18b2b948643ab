"""Storefront: users, catalog, cart and order REST backend."""

__version__ = "0.1.0"
