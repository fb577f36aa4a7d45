"""An in-memory Kubernetes-style object store that records every request."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Iterable, Mapping


class ApiError(Exception):
    """An error reported by the API server."""


class NotFoundError(ApiError):
    """The requested object does not exist."""


class AlreadyExistsError(ApiError):
    """An object with the same kind, namespace and name already exists."""


@dataclass(frozen=True)
class Action:
    """One request made against a client."""

    verb: str
    kind: str
    namespace: str
    name: str


def _key(kind: str, name: str, namespace: str | None) -> tuple[str, str, str]:
    return (kind, namespace or "", name)


def _key_of(obj: Mapping[str, Any]) -> tuple[str, str, str]:
    kind = obj.get("kind")
    metadata = obj.get("metadata") or {}
    name = metadata.get("name")
    if not kind or not name:
        raise ValueError("object must have a kind and a metadata.name")
    return _key(kind, name, metadata.get("namespace"))


def _selector_matches(labels: Mapping[str, str], selector: str) -> bool:
    for term in filter(None, (part.strip() for part in selector.split(","))):
        if "!=" in term:
            key, value = term.split("!=", 1)
            if labels.get(key.strip()) == value.strip():
                return False
        elif "=" in term:
            key, value = term.split("=", 1)
            if labels.get(key.strip()) != value.strip().lstrip("="):
                return False
        elif term.startswith("!"):
            if term[1:].strip() in labels:
                return False
        elif term not in labels:
            return False
    return True


class MemoryClient:
    """Stores objects as dictionaries keyed by kind, namespace and name.

    ``failures`` maps ``(verb, kind)`` to an error raised for that request,
    after the request has been recorded in ``actions``.
    """

    def __init__(
        self,
        objects: Iterable[Mapping[str, Any]] = (),
        failures: Mapping[tuple[str, str], ApiError] | None = None,
    ) -> None:
        self._objects: dict[tuple[str, str, str], dict[str, Any]] = {}
        for obj in objects:
            self._objects[_key_of(obj)] = copy.deepcopy(dict(obj))
        self.failures = dict(failures or {})
        self.actions: list[Action] = []

    def _record(self, verb: str, kind: str, name: str, namespace: str | None) -> None:
        self.actions.append(Action(verb, kind, namespace or "", name))
        failure = self.failures.get((verb, kind))
        if failure is not None:
            raise failure

    def get(self, kind: str, name: str, namespace: str | None = None) -> dict[str, Any]:
        self._record("get", kind, name, namespace)
        try:
            return copy.deepcopy(self._objects[_key(kind, name, namespace)])
        except KeyError:
            raise NotFoundError(f'{kind} "{name}" not found') from None

    def list(
        self,
        kind: str,
        namespace: str | None = None,
        field_name: str | None = None,
        label_selector: str | None = None,
    ) -> list[dict[str, Any]]:
        """List objects of a kind; an empty namespace means all namespaces."""
        self._record("list", kind, "", namespace)
        found = []
        for (obj_kind, obj_namespace, obj_name), obj in sorted(self._objects.items()):
            if obj_kind != kind:
                continue
            if namespace and obj_namespace != namespace:
                continue
            if field_name and obj_name != field_name:
                continue
            labels = (obj.get("metadata") or {}).get("labels") or {}
            if label_selector and not _selector_matches(labels, label_selector):
                continue
            found.append(copy.deepcopy(obj))
        return found

    def create(self, obj: Mapping[str, Any]) -> dict[str, Any]:
        key = _key_of(obj)
        self._record("create", key[0], key[2], key[1])
        if key in self._objects:
            raise AlreadyExistsError(f'{key[0]} "{key[2]}" already exists')
        self._objects[key] = copy.deepcopy(dict(obj))
        return copy.deepcopy(self._objects[key])

    def update(self, obj: Mapping[str, Any]) -> dict[str, Any]:
        key = _key_of(obj)
        self._record("update", key[0], key[2], key[1])
        if key not in self._objects:
            raise NotFoundError(f'{key[0]} "{key[2]}" not found')
        self._objects[key] = copy.deepcopy(dict(obj))
        return copy.deepcopy(self._objects[key])

    def delete(self, kind: str, name: str, namespace: str | None = None) -> None:
        self._record("delete", kind, name, namespace)
        try:
            del self._objects[_key(kind, name, namespace)]
        except KeyError:
            raise NotFoundError(f'{kind} "{name}" not found') from None


def create_or_update_config_map(client: MemoryClient, config_map: Mapping[str, Any]) -> None:
    """Create the ConfigMap, or update it if it already exists."""
    try:
        client.create(config_map)
    except AlreadyExistsError:
        try:
            client.update(config_map)
        except ApiError as err:
            raise ApiError(f"unable to update ConfigMap: {err}") from err
    except ApiError as err:
        raise ApiError(f"unable to create ConfigMap: {err}") from err