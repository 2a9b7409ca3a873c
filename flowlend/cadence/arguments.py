"""JSON-Cadence encoding of arguments and decoding of results — no I/O."""
from __future__ import annotations

import re
from typing import Any, Mapping

# Types whose JSON-Cadence value is a string, kept as strings on decode so
# fixed-point values never round-trip through float.
_STRING_VALUED = frozenset(
    {
        "String", "Address", "Character", "Path",
        "Int", "Int8", "Int16", "Int32", "Int64", "Int128", "Int256",
        "UInt", "UInt8", "UInt16", "UInt32", "UInt64", "UInt128", "UInt256",
        "Word8", "Word16", "Word32", "Word64",
        "Fix64", "UFix64",
    }
)
_COMPOSITES = frozenset({"Struct", "Resource", "Event", "Contract", "Enum"})

_PLACEHOLDER_RE = re.compile(r"\b0x([A-Za-z_][A-Za-z0-9_]*)\b")


def arg(value: Any, type_tag: str) -> dict[str, Any]:
    """Bind a Python value to a JSON-Cadence argument of ``type_tag``.

    Examples:
        arg("50.0", "UFix64") → {"type": "UFix64", "value": "50.0"}
        arg(True, "Bool")     → {"type": "Bool", "value": True}
    """
    if type_tag == "Bool":
        return {"type": "Bool", "value": bool(value)}
    if type_tag == "Optional":
        return {"type": "Optional", "value": value}
    if type_tag not in _STRING_VALUED:
        raise ValueError(f"Unsupported argument type: {type_tag}")
    return {"type": type_tag, "value": str(value)}


def decode(value: Any) -> Any:
    """Convert a JSON-Cadence value into plain Python data.

    Numbers and addresses stay strings, composites become dicts keyed by
    field name, arrays become lists, dictionaries become dicts.
    """
    if not isinstance(value, dict) or "type" not in value:
        raise ValueError(f"Not a JSON-Cadence value: {value!r}")

    kind = value["type"]
    inner = value.get("value")

    if kind == "Void":
        return None
    if kind == "Optional":
        return None if inner is None else decode(inner)
    if kind == "Bool":
        return bool(inner)
    if kind in _STRING_VALUED:
        return inner
    if kind == "Array":
        return [decode(item) for item in inner or []]
    if kind == "Dictionary":
        return {decode(entry["key"]): decode(entry["value"]) for entry in inner or []}
    if kind in _COMPOSITES:
        fields = (inner or {}).get("fields", [])
        return {f["name"]: decode(f["value"]) for f in fields}
    if kind == "Type":
        return (inner or {}).get("staticType")

    raise ValueError(f"Unsupported JSON-Cadence type: {kind}")


def resolve_imports(code: str, contracts: Mapping[str, str]) -> str:
    """Replace ``0xName`` import placeholders with configured contract addresses.

    Placeholders without a configured address are left untouched so the
    ledger reports them.
    """

    def _sub(match: re.Match[str]) -> str:
        return contracts.get(match.group(1), match.group(0))

    return _PLACEHOLDER_RE.sub(_sub, code)
