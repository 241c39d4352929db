"""
API route modules
"""

__all__ = ["articles", "publishers", "users"]
