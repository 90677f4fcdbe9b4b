"""Domain layer — markdown parsing and frontmatter access.

This layer depends only on stdlib and ruamel.yaml.
It must never import from services, commands, output, or config.
"""
