"""
Domain Layer

Business rules of the assembly floor, independent of storage and transport.

Components:
- assembly/: units, workers, assembly entries and the lifecycle service
"""
