"""Short-circuit decorators shared by every chain step.

A step body only has to describe the happy path and raise
:class:`~Quest.errors.StepFailure` when something local goes wrong. The
decorators take care of the rest of the contract:

* if the chain already carries a failure the body is not run at all;
* a :class:`StepFailure` is recorded as the chain's failure (first one wins);
* the step always returns the object it was called on, so wrappers keep the
  chain on their own type.

Consumers use the same decorators for custom steps on their own wrappers.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, TypeVar

from .errors import StepFailure

LOGGER = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _short_circuit(func: F) -> F:
    @functools.wraps(func)
    def step(self, *args, **kwargs):
        if self.error is not None:
            return self
        try:
            func(self, *args, **kwargs)
        except StepFailure as exc:
            LOGGER.debug(
                "chain step failed",
                extra={"step": func.__name__, "error": str(exc)},
            )
            self.record_failure(str(exc), cause=exc.__cause__)
        return self

    return step  # type: ignore[return-value]


def request_step(func: F) -> F:
    """Decorate a builder operation so it honours the short-circuit contract."""

    return _short_circuit(func)


def response_step(func: F) -> F:
    """Decorate a response operation so it honours the short-circuit contract.

    The failure slot consulted is the originating request's, reached through
    the response's ``error`` property.
    """

    return _short_circuit(func)


__all__ = ["request_step", "response_step"]
