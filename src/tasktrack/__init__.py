"""tasktrack: multi-tenant task tracking API.

Users register, log in with email/password, and manage their own work
items. Every item query is scoped to the caller that owns it.
"""

__version__ = "0.1.0"
