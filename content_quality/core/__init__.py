"""
Core pipeline for Content Quality.

This package holds the data models and the processing, scoring,
improvement and monitoring stages.
"""
