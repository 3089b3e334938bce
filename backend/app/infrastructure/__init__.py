"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .s3_client import get_s3_client, public_object_url

__all__ = ['get_s3_client', 'public_object_url']
