"""Infrastructure layer — document loading and the file-backed schema store.

This layer depends on stdlib and third-party libs (ruamel.yaml).
It may import from domain, never from services, commands, or output.
"""
