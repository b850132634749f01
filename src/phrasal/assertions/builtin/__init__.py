from .async_ import ASYNC_ASSERTIONS
from .basic import BASIC_ASSERTIONS
from .parametric import PARAMETRIC_ASSERTIONS


SYNC_ASSERTIONS = (*BASIC_ASSERTIONS, *PARAMETRIC_ASSERTIONS)
ALL_ASSERTIONS = (*SYNC_ASSERTIONS, *ASYNC_ASSERTIONS)

__all__ = [
    "ALL_ASSERTIONS",
    "ASYNC_ASSERTIONS",
    "BASIC_ASSERTIONS",
    "PARAMETRIC_ASSERTIONS",
    "SYNC_ASSERTIONS",
]
