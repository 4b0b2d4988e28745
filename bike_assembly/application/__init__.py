"""Application layer: read models built on top of the lifecycle service."""
