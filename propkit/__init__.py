"""
propkit - property types for SQLAlchemy models.

Key Features
------------
* **ParanoidBoolean**: Soft delete flag. ``destroy()`` keeps the row and
  flags it, ``delete()`` removes it, and default queries skip flagged rows.
* **Regexp**: Stores compiled regular expressions as their source text.

Quick Start
-----------
>>> from sqlalchemy import Column, Integer
>>> from sqlalchemy.orm import declarative_base
>>> from propkit import ParanoidBoolean, ParanoidMixin
>>>
>>> Base = declarative_base()
>>>
>>> class Article(ParanoidMixin, Base):
...     __tablename__ = "articles"
...     id = Column(Integer, primary_key=True)
...     deleted = Column(ParanoidBoolean, default=False, nullable=False)
>>>
>>> article.destroy()                      # soft delete
>>> Article.with_deleted(session).all()    # includes soft-deleted rows
"""

__version__ = "1.0.0"

from .config import PropkitConfig, configure, get_config
from .paranoid import ParanoidMixin, declare_paranoid, including_deleted
from .property import ParanoidBoolean, PropertyType, Regexp, paranoid_column

__all__ = [
    # Property types
    "PropertyType",
    "ParanoidBoolean",
    "Regexp",
    "paranoid_column",
    # Paranoid models
    "ParanoidMixin",
    "declare_paranoid",
    "including_deleted",
    # Configuration
    "PropkitConfig",
    "configure",
    "get_config",
]
