"""Reset agent spend counters at the UTC day (and month) boundary.

Usage:
    python -m scripts.reset_daily_spend
Schedule at 00:00 UTC. Idempotent: only counters from an earlier day or
month are zeroed. Requires Postgres (DATABASE_URL).
"""

import asyncio
import sys

from agentflow.core.config import get_settings
from agentflow.domain.exceptions import SqlNotConfiguredException
from agentflow.infrastructure.container import ServiceContainer
from agentflow.infrastructure.persistence.database import dispose_engine, session_scope
from agentflow.shared.telemetry.logging import setup_logging


async def main() -> int:
    setup_logging()
    try:
        async with session_scope() as session:
            result = await ServiceContainer(session, get_settings()).reset_agent_spend().execute()
    except SqlNotConfiguredException as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        await dispose_engine()
    print(
        f"Daily counters reset: {result.daily_reset}; "
        f"monthly counters reset: {result.monthly_reset}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
