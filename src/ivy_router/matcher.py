"""Matcher — resolves (method, path) to a registered endpoint.

The Router only depends on the ``Matcher`` protocol. The default
``PatternMatcher`` delegates the pattern grammar to Starlette's
``compile_path`` (``/users/{id}``, ``/users/{id:int}``, ``/files/{rest:path}``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from starlette.convertors import Convertor, PathConvertor
from starlette.routing import compile_path

from ivy_router.exceptions import MethodNotAllowed, NotFound


@dataclass(frozen=True)
class RouteMatch:
    """Result of a successful match."""

    endpoint: Any
    path_params: dict[str, Any]
    pattern: str


@runtime_checkable
class Matcher(Protocol):
    """Pluggable routing table.

    ``method=None`` registers the endpoint for every method. ``match``
    raises ``NotFound`` or ``MethodNotAllowed`` when nothing applies.
    """

    def add(self, method: str | None, path: str, endpoint: Any) -> None: ...
    def match(self, method: str, path: str) -> RouteMatch: ...


@dataclass
class _Pattern:
    path: str
    regex: re.Pattern[str]
    convertors: dict[str, Convertor[Any]]
    endpoints: dict[str | None, Any] = field(default_factory=dict)

    @property
    def rank(self) -> int:
        # Static paths first, then parameters, then catch-alls
        if not self.convertors:
            return 0
        if any(isinstance(c, PathConvertor) for c in self.convertors.values()):
            return 2
        return 1

    def endpoint_for(self, method: str) -> Any | None:
        if method in self.endpoints:
            return self.endpoints[method]
        if method == "HEAD" and "GET" in self.endpoints:
            return self.endpoints["GET"]
        return self.endpoints.get(None)


class PatternMatcher:
    """Default matcher built on Starlette path compilation."""

    def __init__(self) -> None:
        self._patterns: dict[str, _Pattern] = {}
        self._ordered: tuple[_Pattern, ...] | None = None

    def add(self, method: str | None, path: str, endpoint: Any) -> None:
        if not path.startswith("/"):
            raise ValueError(f"route path must start with '/', got {path!r}")
        pattern = self._patterns.get(path)
        if pattern is None:
            regex, _, convertors = compile_path(path)
            pattern = _Pattern(path=path, regex=regex, convertors=convertors)
            self._patterns[path] = pattern
            self._ordered = None
        pattern.endpoints[method] = endpoint

    def _resolve(self) -> tuple[_Pattern, ...]:
        if self._ordered is None:
            # sorted() is stable: registration order holds within a rank
            self._ordered = tuple(
                sorted(self._patterns.values(), key=lambda p: p.rank)
            )
        return self._ordered

    def match(self, method: str, path: str) -> RouteMatch:
        allowed: set[str] = set()
        for pattern in self._resolve():
            found = pattern.regex.match(path)
            if found is None:
                continue
            endpoint = pattern.endpoint_for(method)
            if endpoint is None:
                allowed.update(m for m in pattern.endpoints if m is not None)
                continue
            params = {
                key: pattern.convertors[key].convert(value)
                for key, value in found.groupdict().items()
            }
            return RouteMatch(endpoint=endpoint, path_params=params, pattern=pattern.path)

        if allowed:
            raise MethodNotAllowed(frozenset(allowed))
        raise NotFound()

    @property
    def patterns(self) -> list[str]:
        return [p.path for p in self._resolve()]
