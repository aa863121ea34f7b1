"""
Backend-specific adapters used by the repository layer.
"""
