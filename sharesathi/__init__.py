"""
ShareSathi
Indian stock dashboard: watchlists, live quotes and a what-if investment calculator
"""
__version__ = "1.2.0"
