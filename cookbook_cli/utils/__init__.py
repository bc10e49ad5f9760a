"""
Small helpers shared across the application: version tokens, paths,
formatting and structured logging.
"""
