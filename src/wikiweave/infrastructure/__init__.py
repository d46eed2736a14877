"""Infrastructure layer — corpus filesystem access, vault, link graph.

This layer depends on the domain layer and third-party libs (NetworkX,
ruamel.yaml). It must never import from services, commands, or output.
"""
