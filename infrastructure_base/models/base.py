"""
Base model configuration for SQLAlchemy ORM.

This module defines the declarative base that application models can inherit
from. Tables registered on its metadata are created by
``infrastructure_base.utils.database.init_db``.

Usage:
    from infrastructure_base.models.base import Base

    class Customer(Base):
        __tablename__ = "customers"

        id = Column(Integer, primary_key=True)
        name = Column(String)
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
