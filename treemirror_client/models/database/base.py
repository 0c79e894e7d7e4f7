"""
TreeMirror Client - Database Base

Shared declarative base for the client's SQLAlchemy models.
"""

from sqlalchemy.orm import declarative_base

# Create the shared declarative base
Base = declarative_base()
