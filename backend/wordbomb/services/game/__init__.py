"""Game domain services: rooms, roster, turns, countdown and broadcasts.

This package holds the session logic that socket handlers and HTTP routes
call into, keeping transport concerns separated from core game mechanics.
"""
from .coordinator import GameCoordinator

__all__ = ['GameCoordinator']
