"""Business logic layer for accounts app.

- Registration, password and Google sign-in
- JWT access/refresh tokens and their revocation
"""
