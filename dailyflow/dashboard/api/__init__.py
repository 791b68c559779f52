"""
API routers of the DailyFlow dashboard
"""
