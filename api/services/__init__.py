"""
API Services Layer.

Database operations behind the API endpoints. Each function takes the
request's ``QueryExecutor`` as its first argument.
"""

from api.services.jobs import (
    create_job,
    find_all,
    get_job,
    update_job,
    delete_job,
)

__all__ = [
    # Jobs
    "create_job",
    "find_all",
    "get_job",
    "update_job",
    "delete_job",
]
