"""
Domain Interfaces (Ports)
"""

from .clients import TransactionHistoryClient

__all__ = [
    "TransactionHistoryClient",
]
