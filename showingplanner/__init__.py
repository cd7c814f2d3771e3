"""
Showing planner: bookable slots and property tours for a real-estate agency.
"""

__version__ = "0.1.0"
