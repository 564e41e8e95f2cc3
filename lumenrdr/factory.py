"""Registry that builds configurable objects by identifier."""

from __future__ import annotations

from typing import Any, Callable

from lumenrdr.properties import Properties, RenderError

Creator = Callable[[Properties], Any]


class Factory:
    """Maps identifiers to creators and remembers every object it built."""

    def __init__(self) -> None:
        self._registry: dict[str, Creator] = {}
        self.context: list[Any] = []

    def register(self, identifier: str, creator: Creator) -> None:
        """Register ``creator`` under ``identifier``; duplicates are an error."""
        if identifier in self._registry:
            raise RenderError(
                f"Identifier [ {identifier} ] already registered, there might be "
                "some issues with your class implementation"
            )
        self._registry[identifier] = creator

    def unregister(self, identifier: str) -> None:
        """Forget ``identifier``; unknown identifiers are ignored."""
        self._registry.pop(identifier, None)

    def create(self, identifier: str, props: Properties) -> Any:
        """Build an object with the registered creator and record it."""
        creator = self._registry.get(identifier)
        if creator is None:
            raise RenderError(
                "Error creating class from factory, identifier "
                f"[ {identifier} ] not found"
            )
        product = creator(props)
        if product is None:
            raise RenderError(f"Creator for [ {identifier} ] produced nothing")
        self.context.append(product)
        return product

    def clear(self) -> None:
        """Forget every object built so far."""
        self.context.clear()

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._registry