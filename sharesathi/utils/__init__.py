"""
Formatting, market-hours and metrics helpers
"""
