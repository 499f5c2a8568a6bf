"""
Fantasy Playoff Forecaster backend.
"""
