"""State layer.

This package is the single source of truth for how inbound driver reports
are merged into the in-process device cache and the persisted record store.
"""
