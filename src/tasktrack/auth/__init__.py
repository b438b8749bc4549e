"""Authentication and authorization.

Learn: Users log in with email/password and receive a short-lived JWT.
Every protected route resolves that token back into a RequestIdentity
(user id + role), which is then used to gate by role and to scope
item queries by owner.
"""
