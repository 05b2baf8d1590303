"""Adapters turning raw CSV rows into normalized expense rows."""
