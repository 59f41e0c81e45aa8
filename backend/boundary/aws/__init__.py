"""
AWS boundary modules.

Exports: S3MediaClient
"""

from .s3_client import S3MediaClient

__all__ = ["S3MediaClient"]
