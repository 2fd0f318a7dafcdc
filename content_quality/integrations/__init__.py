"""
External service integrations for Content Quality.
"""
