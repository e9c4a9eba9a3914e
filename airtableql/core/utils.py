from __future__ import annotations
from enum import Enum

import strawberry


class _SortDirectionEnum(Enum):
    asc = 'asc'
    desc = 'desc'


SortDirection = strawberry.enum(_SortDirectionEnum, name="order_by")  # type: ignore
