"""
API module for SkyBoard.

Provides read-only endpoints for:
- The HTML departures board
- The JSON aircraft feed
- System status
"""

from skyboard.api.board import board_bp

__all__ = ['board_bp']
