"""
Cross-cutting concerns: configuration, errors and logging.
"""
