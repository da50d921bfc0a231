"""Authentication.

Users register or log in with email/password and receive a signed,
time-limited JWT. Protected routes resolve that token back to a User
through AuthGateway.identify (wired up as the get_current_user dependency).
"""
