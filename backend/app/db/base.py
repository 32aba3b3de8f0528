"""Declarative base shared by all models and Alembic env."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()
