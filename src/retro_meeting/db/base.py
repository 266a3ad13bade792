"""
Declarative base shared by all models
"""
import uuid

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_id() -> str:
    """Short random id used as the primary key of most tables"""
    return uuid.uuid4().hex[:12]
