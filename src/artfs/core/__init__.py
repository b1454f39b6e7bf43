"""
Core infrastructure: constants, logging, configuration.
"""
