"""
Concurrent check runner.

Runs independent checks side by side, each bounded by its own timeout.
A failing or slow check turns into an error Result instead of cancelling
its siblings; cancellation of the caller still propagates to every task.
"""

import asyncio
import logging
from typing import Awaitable, Dict

from sqlalchemy.exc import SQLAlchemyError

from config import ApplicationConfig
from libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


async def run_check(name: str, check: Awaitable[Result], timeout: float) -> Result:
    try:
        return await asyncio.wait_for(check, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Check {name} timed out after {timeout}s")
        return Return.err(
            Error("UPSTREAM_UNAVAILABLE", f"{name} timed out after {timeout}s")
        )
    except SQLAlchemyError as exc:
        logger.warning(f"Check {name} could not reach the store: {exc}")
        return Return.err(Error("UPSTREAM_UNAVAILABLE", f"{name}: store unavailable"))
    except Exception as exc:
        logger.exception(f"Check {name} failed")
        return Return.err(Error("INTERNAL_COMPUTATION", f"{name}: {exc}"))


async def gather_checks(
    checks: Dict[str, Awaitable[Result]], timeout: float = None
) -> Dict[str, Result]:
    """Run named checks concurrently and return their results by name."""
    timeout = timeout if timeout is not None else ApplicationConfig.CHECK_TIMEOUT_SECONDS
    names = list(checks)
    results = await asyncio.gather(
        *(run_check(name, checks[name], timeout) for name in names)
    )
    return dict(zip(names, results))
