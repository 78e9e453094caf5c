"""Infrastructure layer — byte-level loading and template lookup.

This layer depends on stdlib and third-party libs (Jinja2).
It may import domain parsing, never services, commands, or output.
"""
