from __future__ import annotations

from abc import ABC, abstractmethod


class State(ABC):
    """Abstract base class for all turn states.

    States are passive values: they carry no transition logic. The Agent
    decides which state follows which, and the TurnState tracker only records
    the current one. Concrete states are frozen dataclasses, so two instances
    of the same state (and payload) compare equal.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this state for logging and debugging.

        Returns:
            str: The state name (e.g., 'idle', 'waiting_for').
        """
        raise NotImplementedError

    @property
    def expected_param(self) -> str | None:
        """Parameter this state is waiting for, if any."""
        return None

    def __str__(self) -> str:
        return self.name
