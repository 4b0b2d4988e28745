"""
Infrastructure Layer

Storage and scheduling adapters for the assembly domain.
"""
