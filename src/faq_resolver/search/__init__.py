"""
Title search package.

- fuzzy: Levenshtein similarity and best-match selection
- title_index: In-memory ``(tenant_id, title)`` snapshot cache
"""
