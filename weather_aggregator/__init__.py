"""
Weather Aggregator Service
Combines temperature readings from several weather providers into one result.
"""

__version__ = "1.0.0"
__author__ = "Weather Aggregator Team"
__description__ = "Concurrent temperature aggregation across multiple weather providers"
