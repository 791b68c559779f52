"""
Test suite for the DailyFlow streak and statistics engine.
"""
