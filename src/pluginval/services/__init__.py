"""Service layer — validation operations returning ServiceResult.

Services may import from domain and architecture.
They must never import from commands or output.
"""
