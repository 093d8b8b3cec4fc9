"""
Pagination helpers shared by the listing services.

Dependencies: math (stdlib)
System role: Common paging arithmetic
"""

import math


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` items; at least one."""
    return max(1, math.ceil(total / page_size))


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size
