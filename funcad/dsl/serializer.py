"""Canonical JSON serializer for funcad AST nodes.

The serializer produces deterministic output so that golden files and cache
keys stay stable across runs.  Each node receives a content-addressed
identifier derived from its structural JSON encoding; the deserializer
recomputes the hash to guarantee integrity.
"""

from __future__ import annotations

import hashlib
import json
from collections import OrderedDict
from dataclasses import fields
from enum import Enum
from typing import Any, Mapping

from . import ast


def to_json(node: ast.Node, *, ensure_ascii: bool = True) -> str:
    """Serialize ``node`` into canonical JSON."""

    payload = _serialize_node(node)
    return json.dumps(payload, indent=2, separators=(",", ": "), ensure_ascii=ensure_ascii)


def from_json(payload: str) -> ast.Node:
    """Deserialize JSON back into an AST node, validating all node hashes."""

    try:
        raw = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid AST payload: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise ValueError("AST payload root must be an object")
    return _deserialize_node(raw)


# ---------------------------------------------------------------------------
# Serialization helpers


def _serialize_node(node: ast.Node) -> OrderedDict[str, Any]:
    data: OrderedDict[str, Any] = OrderedDict()
    data["type"] = node.node_type
    if node.span is not None:
        data["span"] = list(node.span.to_tuple())
    for field_info in fields(node):
        if field_info.name == "span":
            continue
        data[field_info.name] = _serialize_value(getattr(node, field_info.name))
    data["id"] = _hash_payload(data)
    return data


def _serialize_value(value: Any) -> Any:
    if isinstance(value, ast.Node):
        return _serialize_node(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_serialize_value(item) for item in value]
    return value


def _hash_payload(data: Mapping[str, Any]) -> str:
    normalized = json.dumps(
        _strip_ids(data), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:16]


def _strip_ids(data: Any) -> Any:
    if isinstance(data, Mapping):
        return {key: _strip_ids(value) for key, value in data.items() if key != "id"}
    if isinstance(data, list):
        return [_strip_ids(item) for item in data]
    return data


# ---------------------------------------------------------------------------
# Deserialization helpers


NODE_TYPES: dict[str, type[ast.Node]] = {
    cls.__name__: cls
    for cls in (
        ast.Document,
        ast.Import,
        ast.FuncDef,
        ast.ArgDef,
        ast.NumberLiteral,
        ast.FuncName,
        ast.FunctionCall,
        ast.EmptyArgs,
        ast.PositionalArgs,
        ast.NamedArgs,
        ast.NamedArg,
        ast.Parenthesized,
        ast.Negation,
        ast.BinaryOp,
    )
}


def _deserialize_node(data: Mapping[str, Any]) -> ast.Node:
    _verify_hash(data)
    node_type = data.get("type")
    if not isinstance(node_type, str) or node_type not in NODE_TYPES:
        raise ValueError(f"Unknown node type '{node_type}'")
    cls = NODE_TYPES[node_type]
    kwargs: dict[str, Any] = {}
    span_data = data.get("span")
    if span_data is not None:
        kwargs["span"] = _deserialize_span(node_type, span_data)
    for field_info in fields(cls):
        if field_info.name == "span":
            continue
        if field_info.name not in data:
            raise ValueError(f"{node_type} payload is missing '{field_info.name}'")
        kwargs[field_info.name] = _deserialize_value(data[field_info.name])
    if cls is ast.BinaryOp:
        kwargs["operator"] = ast.BinaryOperator(kwargs["operator"])
    return cls(**kwargs)


def _deserialize_span(node_type: str, value: Any) -> ast.Span:
    width = len(fields(ast.Span))
    if (
        not isinstance(value, list)
        or len(value) != width
        or any(isinstance(item, bool) or not isinstance(item, int) for item in value)
    ):
        raise ValueError(f"{node_type} span must be a list of {width} integers")
    return ast.Span(*value)


def _deserialize_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return _deserialize_node(value)
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def _verify_hash(data: Mapping[str, Any]) -> None:
    stored = data.get("id")
    if stored is None:
        raise ValueError("Serialized node is missing 'id'")
    computed = _hash_payload(data)
    if stored != computed:
        raise ValueError("Serialized node failed integrity check")


__all__ = ["NODE_TYPES", "from_json", "to_json"]
