"""Quantity value type and the signature algorithms behind it."""
