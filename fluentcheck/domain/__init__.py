"""
Domain enums shared across scenarios and responses.
"""
