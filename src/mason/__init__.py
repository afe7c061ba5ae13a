"""
Mason filters - filter composition and deferred substitution

Mason lets template authors wrap rendered content blocks with filters
(trim, cache, repeat, escape, defer) and substitutes deferred content into
the request buffer at flush time.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
