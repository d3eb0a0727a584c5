"""Service layer - access checks returning ServiceResult.

Services may import from domain, access, adapters, plugins and config.
They must never import from commands or output.
"""
