"""Run one SLA compliance sweep over every open project.

Meant to be driven by cron; the engine itself never schedules work.
"""

import asyncio

from buildsketch.core.config import get_settings
from buildsketch.core.logging import configure_structlog
from buildsketch.db import close_db, get_session_factory, init_db
from buildsketch.services.sla_monitor import SlaMonitor


async def main() -> None:
    settings = get_settings()
    configure_structlog(json_logs=not settings.debug)

    await init_db(create_tables=False)
    try:
        monitor = SlaMonitor(get_session_factory())
        changed = await monitor.sweep()
        print(f"SLA sweep complete: {changed} project(s) updated")
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
