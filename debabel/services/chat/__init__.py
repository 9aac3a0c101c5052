"""Chat mediation: prompts, tools, title generation and the request pipeline.

Import explicitly: ``from debabel.services.chat.pipeline import ChatPipeline``.
"""
