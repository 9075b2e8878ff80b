"""Data-access functions, one module per table."""
from jobly.models import company, job, user

__all__ = ["company", "job", "user"]
