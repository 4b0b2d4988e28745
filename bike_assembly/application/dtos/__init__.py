"""
Data Transfer Objects for application layer.

Stable shapes handed to whatever transport sits in front of the engine.
"""

from .assembly_dtos import AssemblyDetailResponse, CurrentAssemblyView

__all__ = ["AssemblyDetailResponse", "CurrentAssemblyView"]
