"""
WokeLang Environment
====================
A chain of scopes. Each scope owns its variables, its own consent cache
and a gratitude log; lookups walk from the innermost scope outwards.
"""
from typing import Iterator

from .errors import WokeRuntimeError
from .values import Value


class Environment:
    """
    One lexical scope with an optional parent.

    Usage:
        globals_ = Environment()
        local = globals_.child()
        local.define("x", IntValue(1))
    """

    def __init__(self, parent: "Environment | None" = None):
        self.parent = parent
        self.variables: dict[str, Value] = {}
        self.consent: dict[str, bool] = {}
        self.gratitude: list[tuple[str, str]] = []

    def child(self) -> "Environment":
        """Create a nested scope whose lookups fall back to this one."""
        return Environment(parent=self)

    def _chain(self) -> Iterator["Environment"]:
        scope = self
        while scope is not None:
            yield scope
            scope = scope.parent

    def find(self, name: str) -> "Environment | None":
        """Return the innermost scope that binds `name`, if any."""
        for scope in self._chain():
            if name in scope.variables:
                return scope
        return None

    def lookup(self, name: str) -> Value:
        scope = self.find(name)
        if scope is None:
            raise WokeRuntimeError(f"Undefined variable: {name}")
        return scope.variables[name]

    def define(self, name: str, value: Value):
        """Bind in this scope, shadowing any outer binding."""
        self.variables[name] = value

    def assign(self, name: str, value: Value):
        """Rebind `name` in whichever scope currently holds it."""
        scope = self.find(name)
        if scope is None:
            raise WokeRuntimeError(f"Cannot assign to undefined variable: {name}")
        scope.variables[name] = value

    # ─────────────────────────────────────────────────────────
    #  Consent & Gratitude
    # ─────────────────────────────────────────────────────────

    def consent_decision(self, permission: str) -> bool | None:
        """Return the cached decision for `permission`, searching outwards."""
        for scope in self._chain():
            if permission in scope.consent:
                return scope.consent[permission]
        return None

    def record_consent(self, permission: str, granted: bool):
        """Cache a decision in this scope only; parents never see it."""
        self.consent[permission] = granted

    def record_gratitude(self, contributor: str, contribution: str):
        self.gratitude.append((contributor, contribution))

    def visible_names(self) -> dict[str, Value]:
        """All bindings visible from here, inner scopes winning."""
        merged: dict[str, Value] = {}
        for scope in reversed(list(self._chain())):
            merged.update(scope.variables)
        return merged
