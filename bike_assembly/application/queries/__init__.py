"""Query services for reporting over the assembly ledger."""

from .assembly_queries import AssemblyQueryService

__all__ = ["AssemblyQueryService"]
