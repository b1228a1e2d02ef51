from __future__ import annotations

from collections import deque
from collections.abc import Callable
from typing import Any

from hexsurfaces.sim.hexmap import HexMap

Command = Callable[["World"], None]


class DuplicateResourceError(ValueError):
    """Raised when a world already holds a resource under the same key."""


class MissingResourceError(KeyError):
    """Raised when a required resource is absent from a world."""


class World:
    """Per-surface resource container.

    Resources are keyed by type unless an explicit key is supplied; any
    ``HexMap``, subclasses included, is keyed by ``HexMap``. A world
    handed to ``Surfaces.register_surface`` gains exactly one ``HexMap``.
    Steps queue structural edits with :meth:`defer`; the pipeline applies
    them as soon as the queuing step returns.
    """

    def __init__(self, *resources: Any) -> None:
        self._resources: dict[Any, Any] = {}
        self._deferred: deque[Command] = deque()
        for resource in resources:
            self.insert_resource(resource)

    def insert_resource(self, resource: Any, *, key: Any = None) -> None:
        if key is None:
            key = HexMap if isinstance(resource, HexMap) else type(resource)
        if key in self._resources:
            raise DuplicateResourceError(f"world already contains resource {_key_name(key)}")
        self._resources[key] = resource

    def contains_resource(self, key: Any) -> bool:
        return key in self._resources

    def get_resource(self, key: Any) -> Any | None:
        return self._resources.get(key)

    def resource(self, key: Any) -> Any:
        if key not in self._resources:
            raise MissingResourceError(f"world has no resource {_key_name(key)}")
        return self._resources[key]

    def remove_resource(self, key: Any) -> Any | None:
        return self._resources.pop(key, None)

    def resource_keys(self) -> list[Any]:
        return list(self._resources)

    @property
    def hexmap(self) -> HexMap[Any]:
        return self.resource(HexMap)

    def defer(self, command: Command) -> None:
        if not callable(command):
            raise TypeError("deferred command must be callable")
        self._deferred.append(command)

    def pending_commands(self) -> int:
        return len(self._deferred)

    def apply_deferred(self) -> int:
        """Apply queued commands in FIFO order; commands queued meanwhile run too."""
        applied = 0
        while self._deferred:
            command = self._deferred.popleft()
            command(self)
            applied += 1
        return applied

    def discard_deferred(self, keep: int = 0) -> int:
        """Drop queued commands after the first ``keep``; returns how many were dropped."""
        dropped = 0
        while len(self._deferred) > keep:
            self._deferred.pop()
            dropped += 1
        return dropped


def _key_name(key: Any) -> str:
    if isinstance(key, type):
        return key.__name__
    return repr(key)
