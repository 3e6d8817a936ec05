"""Layered variable store: one global namespace plus named namespaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

GLOBAL_NS = "GLOBAL"


def _frozen(data: Mapping) -> Mapping:
    return MappingProxyType(dict(data))


@dataclass(frozen=True)
class Namespace:
    """A named set of variables."""

    name: str
    variables: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", _frozen(self.variables))

    @classmethod
    def global_(cls, variables: Optional[Mapping[str, str]] = None) -> "Namespace":
        return cls(name=GLOBAL_NS, variables=variables or {})

    def get(self, key: str) -> Optional[str]:
        return self.variables.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.variables

    def __len__(self) -> int:
        return len(self.variables)

    def to_dict(self) -> Dict[str, object]:
        return {"name": self.name, "variables": dict(self.variables)}


@dataclass(frozen=True)
class Context:
    """Everything a render call can look variables up in.

    ``renders`` maps template paths to output paths. The renderer never
    reads it; only the command line uses it for batch rendering.
    """

    global_ns: Namespace = field(default_factory=Namespace.global_)
    namespaces: Mapping[str, Namespace] = field(default_factory=dict)
    renders: Mapping[Path, Path] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "namespaces", _frozen(self.namespaces))
        object.__setattr__(self, "renders", _frozen(self.renders))

    def get_namespace(self, namespace: str) -> Optional[Namespace]:
        return self.namespaces.get(namespace)

    def has_namespace(self, namespace: str) -> bool:
        return namespace == GLOBAL_NS or namespace in self.namespaces

    def namespace_names(self) -> List[str]:
        return sorted(self.namespaces)

    def get_global_variable(self, key: str) -> Optional[str]:
        return self.global_ns.get(key)

    def get_variable_value(
        self, key: str, namespace: Optional[str] = None
    ) -> Optional[str]:
        """Look ``key`` up in ``namespace``, then in the global namespace.

        Without a namespace only the global namespace is consulted. An
        unknown namespace behaves like an empty one.
        """
        if namespace is not None:
            ns = self.get_namespace(namespace)
            if ns is not None and key in ns:
                return ns.get(key)
        return self.get_global_variable(key)

    def __iter__(self) -> Iterator[Namespace]:
        yield self.global_ns
        for name in self.namespace_names():
            yield self.namespaces[name]

    def to_dict(self) -> Dict[str, object]:
        return {
            "global": self.global_ns.to_dict(),
            "renders": {str(k): str(v) for k, v in self.renders.items()},
            "namespaces": [self.namespaces[n].to_dict() for n in self.namespace_names()],
        }
