"""
Bounded retry for transient database errors.

Managed Postgres drops idle connections and fails over now and then. Views and
services that only read, or that write inside their own atomic block, can be
wrapped with ``retry_on_transient_error`` so one dropped connection does not
surface as a 500 to the user.
"""
from functools import wraps
import logging
import time

from django.conf import settings
from django.db import connection, InterfaceError, OperationalError

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (OperationalError, InterfaceError)


def retry_on_transient_error(func=None, *, attempts=None, backoff=None):
    """
    Retry ``func`` when the database raises a transient error.

    Never retries inside an enclosing transaction: the transaction is already
    broken and only the outermost caller can start over.
    """
    def decorator(inner):
        @wraps(inner)
        def wrapper(*args, **kwargs):
            max_attempts = attempts or getattr(settings, 'DB_RETRY_ATTEMPTS', 3)
            delay = backoff if backoff is not None else getattr(settings, 'DB_RETRY_BACKOFF_SECONDS', 0.5)

            for attempt in range(1, max_attempts + 1):
                try:
                    return inner(*args, **kwargs)
                except TRANSIENT_ERRORS as e:
                    if connection.in_atomic_block or attempt >= max_attempts:
                        logger.error(f"Database error in {inner.__name__} after {attempt} attempt(s): {e}")
                        raise

                    logger.warning(f"Transient database error in {inner.__name__} (attempt {attempt}): {e}")
                    connection.close_if_unusable_or_obsolete()
                    time.sleep(delay)

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
