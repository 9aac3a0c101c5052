"""Database engine, sessions and chat persistence queries.

Imports are intentionally NOT eagerly loaded here so that importing the
query layer does not create the engine as a side effect.
Use explicit imports: ``from debabel.db.queries import ChatStore``, etc.
"""
