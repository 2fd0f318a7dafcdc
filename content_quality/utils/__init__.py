"""
Utilities for Content Quality.
"""
