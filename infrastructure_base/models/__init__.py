"""
This package contains the shared declarative base for mapped models.
"""

from infrastructure_base.models.base import Base

__all__ = ['Base']
