"""
Data Transfer Objects (DTOs) Layer

Immutable attribute bags built from ORM records or plain mappings. DTOs are
what the PublicApi gateways hand out instead of raw database records.
"""

from .base import Dto, DtoAttribute, Descriptor, storage_key

__all__ = ["Dto", "DtoAttribute", "Descriptor", "storage_key"]
