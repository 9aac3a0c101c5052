"""SQLAlchemy ORM models.

Individual models should be imported explicitly:
    from debabel.models.chat import Chat

All models are imported here so Alembic can detect them during migration
autogenerate. This module is imported by alembic/env.py.
"""

from debabel.models.chat import Chat
from debabel.models.message import Message
from debabel.models.stream import Stream

__all__ = [
    "Chat",
    "Message",
    "Stream",
]
