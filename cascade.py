"""
Ordered multi-document deletes with per-step failure accounting.

Steps run one after another. A failing step is logged and remembered instead
of aborting the rest, and `finish` refuses to remove the owning record while
anything failed, so the whole delete can simply be requested again.
"""
import logging
from typing import Any, Callable, List

from pymongo.errors import PyMongoError

from errors import CascadeError

logger = logging.getLogger(__name__)


class Cascade:
    def __init__(self, what: str):
        self.what = what
        self.done: List[str] = []
        self.failed: List[str] = []

    def step(self, name: str, fn: Callable[..., Any], *args, **kwargs) -> Any:
        try:
            result = fn(*args, **kwargs)
        except PyMongoError:
            logger.exception("cascade %s: step %s failed", self.what, name)
            self.failed.append(name)
            return None
        self.done.append(name)
        return result

    def finish(self, name: str, fn: Callable[..., Any], *args, **kwargs) -> None:
        """Delete the owning record, but only after every dependent step succeeded."""
        if not self.failed:
            self.step(name, fn, *args, **kwargs)
        else:
            logger.error("cascade %s: keeping %s, failed steps: %s", self.what, name, ", ".join(self.failed))
            self.failed.append(name)
        if self.failed:
            raise CascadeError(self.what, self.failed)
        logger.info("cascade %s complete: %s", self.what, ", ".join(self.done))
