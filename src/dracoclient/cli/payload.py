"""Payload dump and record listing CLI commands."""

from __future__ import annotations

from pathlib import Path

from ..codec import (
    RecordDescriptor,
    WireBytes,
    WireMapping,
    WireRecord,
    WireSequence,
    WireValue,
    decode,
    registered_records,
)
from ..exceptions import TypeMismatch

_INDENT = "  "


def dump_file(file_path: Path) -> None:
    """Decode a captured payload and print its value tree.

    Args:
        file_path: File holding one encoded value (e.g. a saved args.dat)

    Raises:
        DecodeError: If the file is not a valid payload
    """
    data = file_path.read_bytes()
    value = decode(data)
    print(f"{file_path} ({len(data)} bytes)")
    for line in format_value(value):
        print(line)


def format_value(value: WireValue, depth: int = 0, label: str = "") -> list[str]:
    """Render a value tree as indented lines."""
    pad = _INDENT * depth
    head = f"{pad}{label}"

    if isinstance(value, WireRecord):
        lines = [f"{head}{value.type_id} {{{len(value.fields)} fields}}"]
        for name, child in value.fields:
            lines.extend(format_value(child, depth + 1, f"{name}: "))
        return lines

    if isinstance(value, WireSequence):
        lines = [f"{head}[{len(value)} items]"]
        for i, child in enumerate(value):
            lines.extend(format_value(child, depth + 1, f"{i}: "))
        return lines

    if isinstance(value, WireMapping):
        lines = [f"{head}{{{len(value)} pairs}}"]
        for key, child in value:
            lines.extend(format_value(key, depth + 1, "key: "))
            lines.extend(format_value(child, depth + 2, "value: "))
        return lines

    return [f"{head}{_scalar(value)}"]


def _scalar(value: WireValue) -> str:
    if isinstance(value, WireBytes):
        try:
            return repr(value.as_text())
        except TypeMismatch:
            return f"<{len(value.value)} bytes> {value.value.hex()}"
    if value.is_null():
        return "null"
    return repr(value.to_python())


def print_records() -> None:
    """Print every registered record descriptor."""
    descriptors = registered_records()
    print(f"{len(descriptors)} record{'s' if len(descriptors) != 1 else ''} registered.")
    print()
    for descriptor in descriptors:
        print_descriptor(descriptor)


def print_descriptor(descriptor: RecordDescriptor) -> None:
    """Print one descriptor's fields in wire order."""
    title = f"{descriptor.type_id} ({descriptor.model_class.__name__})"
    print(f"{'=' * 12} {title} {'=' * 12}")
    for field in descriptor.fields:
        kind = field.kind.value
        if field.record_class is not None:
            kind = f"record {getattr(field.record_class, 'record_type', '?')}"
        if field.nullable:
            kind += ", nullable"
        desc = f"{field.position + 1}. {field.wire_name}"
        dots = "." * max(1, 48 - len(desc) - len(kind))
        print(f"        {desc}{dots}{kind}")
    print()
