"""Domain layer — link syntax, resolution, backlinks, blocks, transclusion.

This layer depends only on stdlib, pydantic and ruamel.yaml (frontmatter).
It must never import from services, infrastructure, commands, or config.
"""
