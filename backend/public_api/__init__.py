"""
PublicApi gateways.

Each gateway wraps one model and hands out DTOs only. Module-specific
gateways live next to their DTOs (user_management, documents).
"""

from .base import PublicApi, BatchCreateResult

__all__ = ["PublicApi", "BatchCreateResult"]
