from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Awaitable

if TYPE_CHECKING:
    from parley.agent.states.base import State
    from parley.agent.types import IntentDecision, TurnRecord


class IntentHandler(ABC):
    """Abstract base class for intent handlers.

    A handler looks at the latest input, the conversation so far and the current
    turn state, and either proposes a decision or returns None when the input is
    not its concern. Handlers may raise; the resolver reports the failure and
    moves on to the next handler.
    """

    @abstractmethod
    def handle(
        self,
        text: str,
        log: list["TurnRecord"],
        state: "State",
    ) -> "IntentDecision | None | Awaitable[IntentDecision | None]":
        """Propose a decision for `text`, or return None if it does not apply.

        May be a plain method or a coroutine.
        """
        raise NotImplementedError
