"""
DailyFlow - Dashboard
JSON API over the streak and statistics engine
"""

from .app import create_app

__all__ = ['create_app']
