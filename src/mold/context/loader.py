"""Context file loading.

Context discovery:
- an explicitly given path wins,
- otherwise the ``MOLD_CONTEXT`` environment variable,
- otherwise ``mold.yaml`` in the per-user application directory.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import click
import yaml

from ..errors import ContextError
from .model import GLOBAL_NS, Context, Namespace

logger = logging.getLogger(__name__)

CONTEXT_ENV_VAR = "MOLD_CONTEXT"
CONTEXT_FILE_NAME = "mold.yaml"


class ContextLoader(yaml.SafeLoader):
    """SafeLoader that keeps plain scalars as written.

    Only null and merge keys are resolved implicitly, so `0755`, `1.10` or
    `yes` stay strings instead of turning into numbers and booleans.
    """


ContextLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag in ("tag:yaml.org,2002:null", "tag:yaml.org,2002:merge")
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _parse_value(value: Any, where: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ContextError(f"{where}: expected a string value, got {type(value).__name__}")
    return value


def _parse_namespace(data: Any, where: str) -> Namespace:
    if not isinstance(data, dict):
        raise ContextError(f"{where}: expected a mapping with `name` and `variables`")
    name = data.get("name")
    if not isinstance(name, str):
        raise ContextError(f"{where}: `name` must be a string")
    variables = data.get("variables")
    if variables is None:
        variables = {}
    if not isinstance(variables, dict):
        raise ContextError(f"{where} ({name}): `variables` must be a mapping")
    out: Dict[str, str] = {}
    for key, value in variables.items():
        if not isinstance(key, str):
            raise ContextError(f"{where} ({name}): variable names must be strings, got {key!r}")
        out[key] = _parse_value(value, f"{where} ({name}).{key}")
    return Namespace(name=name, variables=out)


def _resolve_path(raw: Any, base_dir: Optional[Path], where: str) -> Path:
    if not isinstance(raw, str):
        raise ContextError(f"{where}: render paths must be strings, got {raw!r}")
    path = Path(raw).expanduser()
    if base_dir is not None and not path.is_absolute():
        path = base_dir / path
    return path


def parse_context_dict(data: Any, base_dir: Optional[Path] = None) -> Context:
    """Build a Context from an already deserialized document.

    A namespace literally named GLOBAL replaces the ``global`` block. Render
    plan paths are resolved against ``base_dir`` when it is given.
    """
    if not isinstance(data, dict):
        raise ContextError("context must be a mapping")
    if "namespaces" not in data:
        raise ContextError("context is missing the `namespaces` list")
    raw_namespaces = data["namespaces"]
    if raw_namespaces is None:
        raw_namespaces = []
    if not isinstance(raw_namespaces, list):
        raise ContextError("`namespaces` must be a list")

    namespaces: Dict[str, Namespace] = {}
    for idx, raw in enumerate(raw_namespaces):
        ns = _parse_namespace(raw, f"namespaces[{idx}]")
        namespaces[ns.name] = ns

    global_ns = namespaces.pop(GLOBAL_NS, None)
    if global_ns is None:
        raw_global = data.get("global")
        if raw_global is None:
            global_ns = Namespace.global_()
        else:
            global_ns = _parse_namespace(raw_global, "global")

    raw_renders = data.get("renders")
    if raw_renders is None:
        raw_renders = {}
    if not isinstance(raw_renders, dict):
        raise ContextError("`renders` must be a mapping of template path to output path")
    renders = {
        _resolve_path(src, base_dir, "renders"): _resolve_path(dst, base_dir, f"renders.{src}")
        for src, dst in raw_renders.items()
    }

    return Context(global_ns=global_ns, namespaces=namespaces, renders=renders)


def loads_context(text: str, base_dir: Optional[Path] = None) -> Context:
    """Parse a YAML context document."""
    try:
        data = yaml.load(text, Loader=ContextLoader)
    except yaml.YAMLError as e:
        raise ContextError(f"context deserialization error - {e}") from e
    if data is None:
        data = {}
    return parse_context_dict(data, base_dir=base_dir)


def load_context(path: Path) -> Context:
    """Load a YAML context file; relative render paths are relative to it."""
    try:
        with path.open("r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise ContextError(f"context file read error - {e}") from e
    context = loads_context(text, base_dir=path.resolve().parent)
    logger.debug(
        "Loaded context %s: %d global variables, %d namespaces, %d renders",
        path,
        len(context.global_ns),
        len(context.namespaces),
        len(context.renders),
    )
    return context


def default_context_path() -> Path:
    return Path(click.get_app_dir("mold")) / CONTEXT_FILE_NAME


def discover_context_path(explicit: Optional[Path] = None) -> Optional[Path]:
    """Return the context file to use, or None if there is none."""
    if explicit is not None:
        return explicit
    env_path = os.getenv(CONTEXT_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    candidate = default_context_path()
    if candidate.exists():
        return candidate
    return None
