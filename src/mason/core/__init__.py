"""Core runtime for Mason filters: filter composition, deferral and requests."""
