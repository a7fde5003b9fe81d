"""
Cleanup of expired job postings.

Jobs expire 12h01m after their last create or replace. The repository
already drops expired rows before each job operation; this module runs
the same purge on demand (CLI `cleanup`, and once at application start).
"""

from typing import Tuple

from storage.repositories import JobRepository

from .logger import get_logger

logger = get_logger()


def cleanup_expired_jobs(repository: JobRepository) -> Tuple[int, int]:
    """
    Remove every job past its expiry.

    Args:
        repository: Job repository bound to the target database

    Returns:
        Tuple of (total_jobs_before, total_jobs_after)
        Difference = jobs_removed
    """
    jobs_before = repository.count()
    jobs_removed = repository.purge_expired()
    jobs_after = jobs_before - jobs_removed

    logger.info(
        f"Cleanup complete: {jobs_removed} removed, {jobs_after} remaining",
        jobs_before=jobs_before,
        jobs_removed=jobs_removed,
        jobs_after=jobs_after,
    )
    return (jobs_before, jobs_after)
