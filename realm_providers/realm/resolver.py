"""Provider discovery by walking a fixed attribute chain from a root bean.

Starting at the root handle, each attribute in ``RealmSchema.chain`` is read
from the handle produced by the previous read. The last attribute yields the
array of authentication provider handles; each provider's name attribute keys
the resulting :class:`ProviderRegistry`.

Every link produces an explicit lookup outcome (``Present`` or ``Absent``).
The walk stops at the first ``Absent`` and ``resolve`` decides once what that
means:

- absent final link (the realm has no provider list): empty registry, unless
  the resolver is strict;
- absent intermediate link: :class:`ResolutionError`;
- a link of the wrong shape: :class:`ResolutionError`;
- any other remote failure (unreachable, denied, server error) propagates as
  :class:`RemoteCallError`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from ..base.errors import ErrorCode, RemoteCallError, ResolutionError
from ..base.handles import Handle
from ..base.interfaces import RemoteInvoker
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import DOMAIN_RUNTIME_SERVICE, PROVIDER_ATTRIBUTE_CHAIN, PROVIDER_NAME_ATTRIBUTE
from .dispatch import RemoteDispatcher
from .registry import ProviderRegistry


@dataclass(frozen=True)
class RealmSchema:
    """Where providers live on the remote service.

    Attributes:
        root: Well-known root bean the walk starts from.
        chain: Attribute names read in order; all but the last must yield a
            handle, the last yields the provider handle array.
        name_attribute: Attribute holding each provider's name.
    """

    root: Handle = field(default_factory=lambda: Handle(DOMAIN_RUNTIME_SERVICE))
    chain: Tuple[str, ...] = PROVIDER_ATTRIBUTE_CHAIN
    name_attribute: str = PROVIDER_NAME_ATTRIBUTE

    def __post_init__(self) -> None:
        if not self.chain:
            raise ValueError("RealmSchema.chain must name at least one attribute")

    @classmethod
    def from_config(cls, data: Mapping[str, Any]) -> "RealmSchema":
        """Build a schema from a ``realm`` config section (``root``, ``chain``, ``name_attribute``).

        Keys that are missing or ``null`` keep their defaults. A present value
        that is blank, or a ``chain`` that is not a list of attribute names,
        raises :class:`ResolutionError` with code ``VALIDATION``.
        """
        kwargs: dict[str, Any] = {}
        if data.get("root") is not None:
            kwargs["root"] = Handle(_config_name(data["root"], "root"))
        if data.get("chain") is not None:
            chain = data["chain"]
            if not isinstance(chain, (list, tuple)) or not chain:
                raise ResolutionError(
                    f"realm.chain must be a non-empty list of attribute names, got {chain!r}",
                    operation="from_config",
                )
            kwargs["chain"] = tuple(_config_name(a, "chain") for a in chain)
        if data.get("name_attribute") is not None:
            kwargs["name_attribute"] = _config_name(data["name_attribute"], "name_attribute")
        return cls(**kwargs)


def _config_name(value: Any, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ResolutionError(
            f"realm.{key} must be a non-empty string, got {value!r}",
            operation="from_config",
        )
    return value.strip()


@dataclass(frozen=True)
class Present:
    value: Any


@dataclass(frozen=True)
class Absent:
    step: int
    attribute: str
    bean: str
    reason: str
    cause: Optional[RemoteCallError] = None


Lookup = Union[Present, Absent]


class HandleResolver:
    """Discover the provider registry of the default realm."""

    def __init__(
        self,
        invoker: RemoteInvoker,
        schema: Optional[RealmSchema] = None,
        *,
        strict: bool = False,
        dispatcher: Optional[RemoteDispatcher] = None,
    ) -> None:
        self._schema = schema or RealmSchema()
        self._strict = strict
        self._logger = get_logger("realm_providers.resolver")
        self._dispatch = dispatcher or RemoteDispatcher(invoker, self._logger)

    @property
    def schema(self) -> RealmSchema:
        return self._schema

    def resolve(self) -> ProviderRegistry:
        """Walk the attribute chain and return the provider registry.

        Raises
        ------
        ResolutionError
            An intermediate link is absent, a link has an unexpected shape, or
            (in strict mode) the provider list itself is absent.
        RemoteCallError
            A read failed for a reason other than the attribute being absent.
        """
        ctx = LogContext(bean=self._schema.root.object_name)
        normalized_log_event(self._logger, "resolve.start", ctx, phase="start")
        outcome = self._walk()
        last = len(self._schema.chain) - 1

        if isinstance(outcome, Absent):
            if outcome.step == last and not self._strict:
                normalized_log_event(
                    self._logger,
                    "resolve.soft_fail",
                    LogContext(bean=outcome.bean, operation=outcome.attribute),
                    phase="finalize",
                    count=0,
                    level=logging.WARNING,
                    reason=outcome.reason,
                )
                return ProviderRegistry()
            raise ResolutionError(
                f"Attribute '{outcome.attribute}' of {outcome.bean} is absent ({outcome.reason})",
                code=ErrorCode.NOT_FOUND,
                operation=outcome.attribute,
                raw=outcome.cause,
            )

        registry = self._build_registry(outcome.value)
        normalized_log_event(
            self._logger,
            "resolve.end",
            ctx,
            phase="finalize",
            count=len(registry),
            providers=registry.names(),
        )
        return registry

    # ------------------------------------------------------------------
    # Chain walk

    def _walk(self) -> Lookup:
        current = self._schema.root
        last = len(self._schema.chain) - 1
        for step, attribute in enumerate(self._schema.chain):
            outcome = self._lookup(step, current, attribute)
            if isinstance(outcome, Absent) or step == last:
                return outcome
            if not isinstance(outcome.value, Handle):
                raise ResolutionError(
                    f"Attribute '{attribute}' of {current} is a {type(outcome.value).__name__}, expected a bean reference",
                    operation=attribute,
                )
            current = outcome.value
        raise AssertionError("unreachable: chain is never empty")  # pragma: no cover

    def _lookup(self, step: int, handle: Handle, attribute: str) -> Lookup:
        try:
            value = self._dispatch.read_attribute(handle, attribute)
        except RemoteCallError as exc:
            if exc.code is ErrorCode.NOT_FOUND:
                return Absent(step, attribute, handle.object_name, "not found", exc)
            raise
        if value is None:
            return Absent(step, attribute, handle.object_name, "null")
        return Present(value)

    # ------------------------------------------------------------------
    # Provider names

    def _build_registry(self, providers: Any) -> ProviderRegistry:
        list_attr = self._schema.chain[-1]
        if isinstance(providers, Handle) or not isinstance(providers, Sequence) or isinstance(providers, str):
            raise ResolutionError(
                f"Attribute '{list_attr}' is a {type(providers).__name__}, expected an array of bean references",
                operation=list_attr,
            )
        entries = []
        seen: set[str] = set()
        for handle in providers:
            if not isinstance(handle, Handle):
                raise ResolutionError(
                    f"Attribute '{list_attr}' contains a {type(handle).__name__}, expected a bean reference",
                    operation=list_attr,
                )
            name = self._provider_name(handle)
            if name in seen:
                raise ResolutionError(f"Duplicate provider name '{name}'", operation=self._schema.name_attribute)
            seen.add(name)
            entries.append((name, handle))
        return ProviderRegistry(entries)

    def _provider_name(self, handle: Handle) -> str:
        attribute = self._schema.name_attribute
        outcome = self._lookup(len(self._schema.chain), handle, attribute)
        if isinstance(outcome, Absent):
            raise ResolutionError(
                f"Provider {handle} has no '{attribute}' attribute ({outcome.reason})",
                code=ErrorCode.NOT_FOUND,
                operation=attribute,
                raw=outcome.cause,
            )
        name = outcome.value
        if not isinstance(name, str) or not name:
            raise ResolutionError(
                f"Provider {handle} reported a {type(name).__name__} name, expected a non-empty string",
                operation=attribute,
            )
        return name


__all__ = ["RealmSchema", "HandleResolver", "Present", "Absent", "Lookup"]
