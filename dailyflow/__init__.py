"""
DailyFlow - personal productivity dashboard engine

Day logging, habits, goals and projects with streak tracking,
statistics and rule-based insights.
"""

__version__ = "1.0.0"
