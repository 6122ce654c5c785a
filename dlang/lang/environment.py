"""Lexical scopes for dlang evaluation. A scope owns its bindings and points at the scope it was created in; names are
resolved by walking outward until found.
"""

import logging
from typing import Any, Dict, Optional

from dlang.lang.error import EvaluationError

logger = logging.getLogger(__name__)


class Environment:
    """A name -> value mapping plus a (non-owning) reference to its enclosing scope. The root Environment of a run has
    no parent; every function call gets a child of the function's defining Environment.
    """

    def __init__(self, bindings: Optional[Dict[str, Any]] = None, parent: Optional["Environment"] = None):
        self._bindings: Dict[str, Any] = bindings if bindings is not None else {}
        self._parent: Optional["Environment"] = parent

    @property
    def parent(self) -> Optional["Environment"]:
        return self._parent

    @property
    def bindings(self) -> Dict[str, Any]:
        """Copy of the bindings defined directly in this scope."""
        return self._bindings.copy()

    def resolve(self, name: str) -> Optional["Environment"]:
        """Returns the nearest Environment (self or an ancestor) that binds name, or None."""
        env = self
        while env is not None:
            if name in env._bindings:
                return env
            env = env._parent
        return None

    def lookup(self, name: str) -> Any:
        """Returns the value bound to name in this scope or the nearest enclosing one.

        Raises:
            EvaluationError: if name is not bound anywhere in the chain.
        """
        env = self.resolve(name)
        if env is None:
            raise EvaluationError("undefined variable '{}'", name)
        return env._bindings[name]

    def define(self, name: str, value: Any) -> None:
        """Binds (or rebinds) name in this scope only. Parent scopes are never touched."""
        logger.debug("define %r in env %d", name, id(self))
        self._bindings[name] = value

    def assign(self, name: str, value: Any) -> None:
        """Rebinds an existing name in the scope that holds it, which is not necessarily this one.

        Raises:
            EvaluationError: if name has not been declared in any accessible scope.
        """
        env = self.resolve(name)
        if env is None:
            raise EvaluationError("assignment to undeclared variable '{}'", name)
        env._bindings[name] = value

    def extend(self, bindings: Dict[str, Any]) -> "Environment":
        """Returns a new child scope of this one holding bindings."""
        logger.debug("extending env %d with %s", id(self), list(bindings))
        return Environment(bindings, parent=self)

    def __contains__(self, name: str) -> bool:
        return self.resolve(name) is not None

    def __repr__(self) -> str:
        parent_id = id(self._parent) if self._parent else None
        return f"<Environment id={id(self)} parent={parent_id} bindings={list(self._bindings)}>"
