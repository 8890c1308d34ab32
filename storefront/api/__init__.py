"""
HTTP API for the storefront voice assistant.
"""
