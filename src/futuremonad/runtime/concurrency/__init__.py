"""Future primitive and asyncio interop.

The combinators only touch futures through the primitive module; interop
connects them to asyncio code.
"""

from .interop import from_coroutine, to_awaitable, wait
from .primitive import create_future, is_settled, on_settle, read_state, settle, settle_from

__all__ = [
    # Primitive
    "create_future", "settle", "settle_from", "on_settle", "is_settled", "read_state",
    # Interop
    "to_awaitable", "from_coroutine", "wait",
]
