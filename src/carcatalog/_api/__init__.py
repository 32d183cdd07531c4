"""Endpoint modules for the car API.

Internal to carcatalog and may change at any time.
"""
