#!/usr/bin/env python3
"""Delete notifications past their retention period.

Meant to be run periodically (e.g. a daily cron job).
"""

import asyncio
import sys

import logfire

from forum.application.usecase.notification import (
    PurgeNotificationsRequest,
    PurgeNotificationsUseCase,
)
from forum.config import Settings
from forum.util.di.container import create_container
from forum.util.observability import configure_logfire


async def purge() -> int:
    container = create_container()
    try:
        async with container() as request_container:
            use_case = await request_container.get(PurgeNotificationsUseCase)
            response = await use_case.execute(PurgeNotificationsRequest())
    finally:
        await container.close()
    return response.deleted


def main() -> int:
    """Run the retention sweep and log any errors to Logfire."""
    settings = Settings()

    configure_logfire(settings)

    try:
        deleted = asyncio.run(purge())
        logfire.info(
            "Notification purge completed",
            deleted=deleted,
            retention_days=settings.notifications.retention_days,
        )
        return 0

    except Exception as e:
        logfire.error(
            "Notification purge failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
