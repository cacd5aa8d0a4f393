"""
Small query builders shared by services.
"""

from sqlalchemy import func, select


def count_subquery(model, *criteria):
    """A scalar `(SELECT count(*) FROM model WHERE ...)` to embed in a wider SELECT."""
    query = select(func.count()).select_from(model)
    if criteria:
        query = query.where(*criteria)
    return query.scalar_subquery()
