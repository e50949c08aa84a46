"""
Recipe catalog and ingredient search.

Responsibilities:
- Hold recipe records behind a repository interface.
- Normalize comma-separated ingredient queries into tokens.
- Score candidates locally and keep the top matches.
- Let a remote ranker reorder the top matches, falling back to local order.
"""
