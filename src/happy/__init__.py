"""
Happy: orphanage listings API with an authenticated admin dashboard.
"""

__version__ = "0.1.0"
