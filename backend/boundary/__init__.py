"""
Boundary layer for external system integrations.

Handles all interactions with external systems (PostgreSQL and S3 media
storage). Provides adapters and clients for infrastructure dependencies.
"""
