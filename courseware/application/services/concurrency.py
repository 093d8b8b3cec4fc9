"""
Helpers for issuing independent I/O concurrently.

Dependencies: asyncio
System role: Concurrent side-effect execution
"""

import asyncio
import logging
from typing import Any, Awaitable

logger = logging.getLogger(__name__)


async def run_independently(*steps: tuple[str, Awaitable[Any]]) -> list[Any]:
    """
    Await named steps concurrently; one failing does not stop the others.

    Every failure is logged. After all steps settle the first failure is
    re-raised.

    Args:
        *steps: (name, awaitable) pairs

    Returns:
        list: Step results in order
    """
    names = [name for name, _ in steps]
    results = await asyncio.gather(*(aw for _, aw in steps), return_exceptions=True)
    errors = []
    for name, result in zip(names, results):
        if isinstance(result, BaseException):
            logger.error(
                "Concurrent step failed",
                extra={"step": name, "error": str(result), "error_type": type(result).__name__},
            )
            errors.append(result)
    if errors:
        raise errors[0]
    return results
