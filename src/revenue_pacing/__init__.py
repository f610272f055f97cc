"""
Revenue pacing dashboard core.

Target resolution, period filtering, attainment aggregation, forecasting and
alerting for the Austin and Charlotte locations.
"""

__version__ = "1.0.0"
