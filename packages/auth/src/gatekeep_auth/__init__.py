"""Gatekeep credential core: hashing, tokens, user store, and the Auth service."""
