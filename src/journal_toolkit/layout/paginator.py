"""
Module: layout.paginator

Purpose:
    Assign measured content blocks to pages using greedy space-based
    placement. Page 1 has less room than later pages because it carries
    the title block.

Key Functions:
    - paginate(): Partition block indices into pages
    - build_page_plans(): Attach heights and capacities to a partition

Algorithm:
    Single greedy pass:
    1. Capacity of a page = single-column body height x column count
    2. If a block does not fit in what is left and the page already has
       a block, start a new page (later-page capacity)
    3. Otherwise place it, even if it overflows an empty page
    4. A forced break starts a new page before the block when the
       current page is non-empty

Dependencies:
    - layout.config: PageGeometry
    - layout.models: PagePlan

Used By:
    - controller.layout_paper
    - layout.session.PaginationSession
"""

from __future__ import annotations

import logging
from typing import Collection, List, Sequence

from .config import PageGeometry, clamp_columns
from .models import PagePlan

logger = logging.getLogger(__name__)


def paginate(
    block_heights: Sequence[float],
    geometry: PageGeometry,
    column_count: int,
    *,
    forced_breaks: Collection[int] = (),
) -> List[List[int]]:
    """
    Partition block indices into pages.

    Columns are approximated linearly: an N-column page holds N times
    the single-column body height.

    Args:
        block_heights: Natural height of each block at single-column width
        geometry: Page vertical space
        column_count: Body columns; clamped into 1..3
        forced_breaks: Indices that must start a new page (manual breaks)

    Returns:
        Non-empty list of pages, each an increasing list of block indices.
        Every index appears exactly once. Empty input gives [[]].

    Example:
        >>> geometry = PageGeometry(inner_height=300, title_height=100)
        >>> paginate([100, 150, 80], geometry, 1)
        [[0], [1, 2]]
    """
    columns = clamp_columns(column_count)
    if columns != column_count:
        logger.warning(f"column_count {column_count} out of range, using {columns}")

    first_capacity = geometry.page1_capacity(columns)
    later_capacity = geometry.later_capacity(columns)

    pages: List[List[int]] = [[]]
    used = 0.0
    capacity = first_capacity

    for index, height in enumerate(block_heights):
        current = pages[-1]
        breaks_here = index in forced_breaks
        if current and (breaks_here or used + height > capacity):
            pages.append([])
            current = pages[-1]
            used = 0.0
            capacity = later_capacity
        if not current and height > capacity:
            logger.warning(
                f"Block {index} overflows page {len(pages)}: "
                f"{height:.1f} needed, {capacity:.1f} available"
            )
        current.append(index)
        used += height

    logger.debug(f"Paginated {len(block_heights)} blocks onto {len(pages)} pages")
    return pages


def build_page_plans(
    partition: Sequence[Sequence[int]],
    block_heights: Sequence[float],
    geometry: PageGeometry,
    column_count: int,
) -> List[PagePlan]:
    """
    Describe each page of a partition with its used height and capacity.

    Args:
        partition: Output of paginate()
        block_heights: Heights passed to paginate()
        geometry: Geometry passed to paginate()
        column_count: Column count passed to paginate()

    Returns:
        PagePlan per page, numbered from 1
    """
    plans = []
    for offset, indices in enumerate(partition):
        number = offset + 1
        capacity = (
            geometry.page1_capacity(column_count) if number == 1
            else geometry.later_capacity(column_count)
        )
        plans.append(PagePlan(
            number=number,
            block_indices=tuple(indices),
            height_used=sum(block_heights[i] for i in indices),
            capacity=capacity,
            has_title=number == 1,
        ))
    return plans
