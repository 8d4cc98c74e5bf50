"""Poll a refresh function until a target state is observed."""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, Optional, Tuple

from acigroup.errors import PollTimeoutError, UnexpectedStateError


logger = logging.getLogger(__name__)

RefreshFunc = Callable[[], Awaitable[Tuple[Any, str]]]


class DetachState(str, Enum):
    """Attachment of a container group to a network profile."""
    ATTACHED = "Attached"
    DETACHED = "Detached"
    ERROR = "Error"


def _state_name(state: Any) -> str:
    return state.value if isinstance(state, Enum) else str(state)


async def wait_for_state(
    refresh: RefreshFunc,
    pending: Iterable[str],
    target: Iterable[str],
    *,
    timeout: float,
    min_interval: float = 0.0,
    continuous_target_occurrence: int = 1,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> Any:
    """Call ``refresh`` until it reports a target state enough times in a row.

    ``refresh`` returns ``(result, state)``. A pending state resets the
    consecutive target count, any other state raises UnexpectedStateError and
    an exception raised by ``refresh`` propagates unchanged. Returns the
    result of the last refresh.
    """
    pending = [_state_name(s) for s in pending]
    target = [_state_name(s) for s in target]
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout

    last_state: Optional[str] = None
    target_count = 0
    first = True

    while True:
        if not first:
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise PollTimeoutError(timeout, last_state, target)
            await sleep(min(min_interval, remaining))
        first = False

        if loop.time() > deadline:
            raise PollTimeoutError(timeout, last_state, target)

        result, state = await refresh()
        last_state = _state_name(state)

        if last_state in target:
            target_count += 1
            logger.debug(f"Observed target state {last_state} ({target_count}/{continuous_target_occurrence})")
            if target_count >= continuous_target_occurrence:
                return result
        elif last_state in pending:
            target_count = 0
            logger.debug(f"Observed pending state {last_state}")
        else:
            raise UnexpectedStateError(last_state, pending + target)
