"""Milestone tracker and escrow ledger domain"""

from .router import router

__all__ = ["router"]
