"""Domain layer — error codes, value types, identifier rules, growth models.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
