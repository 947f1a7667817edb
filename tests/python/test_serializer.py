"""Tests for canonical JSON serialisation of funcad ASTs."""

import json

import pytest

from funcad.dsl import ast, grammar, serializer


def test_round_trip_is_canonical(program):
    payload = serializer.to_json(program.document)
    restored = serializer.from_json(payload)
    assert restored == program.document
    assert serializer.to_json(restored) == payload


def test_spans_and_enums_survive_round_trip():
    document = grammar.parse_document("f(x = 1) = -x / g(2, y)")
    restored = serializer.from_json(serializer.to_json(document))
    body = restored.statements[0].body
    assert body.operator is ast.BinaryOperator.DIV
    assert body.span == document.statements[0].body.span
    assert restored.statements[0].parameters[0].default.lexeme == "1"
    assert isinstance(body.right.arguments.values, tuple)


def test_bare_reference_and_empty_call_stay_distinct():
    document = grammar.parse_document("a = f b = f()")
    restored = serializer.from_json(serializer.to_json(document))
    bare, empty = (definition.body for definition in restored.definitions)
    assert bare.arguments is None
    assert isinstance(empty.arguments, ast.EmptyArgs)


def test_node_ids_are_content_addressed():
    first = json.loads(serializer.to_json(grammar.parse_expression("1 + 2")))
    second = json.loads(serializer.to_json(grammar.parse_expression("1 + 2")))
    third = json.loads(serializer.to_json(grammar.parse_expression("1 + 3")))
    assert first["id"] == second["id"]
    assert first["id"] != third["id"]


def test_corrupted_hash_is_detected():
    document = grammar.parse_document("import a")
    data = json.loads(serializer.to_json(document))
    data["id"] = "0000000000000000"
    with pytest.raises(ValueError):
        serializer.from_json(json.dumps(data))


def test_tampered_child_is_detected():
    data = json.loads(serializer.to_json(grammar.parse_expression("1 + 2")))
    data["left"]["lexeme"] = "5"
    with pytest.raises(ValueError):
        serializer.from_json(json.dumps(data))


def test_unknown_node_type_is_rejected():
    payload = {"type": "Lambda"}
    payload["id"] = serializer._hash_payload(payload)
    with pytest.raises(ValueError, match="Unknown node type"):
        serializer.from_json(json.dumps(payload))


@pytest.mark.parametrize("payload", ["not json", "[]", '{"type": "Document"}'])
def test_malformed_payloads_are_rejected(payload):
    with pytest.raises(ValueError):
        serializer.from_json(payload)


@pytest.mark.parametrize(
    "span",
    [[0, 1, 1], [0, 1, 1, 1, 1, 2, 9], ["0", 1, 1, 1, 1, 2], [0, 1, 1, 1, 1, True], {"start": 0}],
)
def test_malformed_spans_are_rejected(span):
    payload = {"type": "EmptyArgs", "span": span}
    payload["id"] = serializer._hash_payload(payload)
    with pytest.raises(ValueError, match="span must be a list of 6 integers"):
        serializer.from_json(json.dumps(payload))


@pytest.mark.parametrize("node_type", [["Document"], {"name": "Document"}, 3, None])
def test_non_string_node_types_are_rejected(node_type):
    payload = {"type": node_type, "statements": []}
    payload["id"] = serializer._hash_payload(payload)
    with pytest.raises(ValueError, match="Unknown node type"):
        serializer.from_json(json.dumps(payload))
