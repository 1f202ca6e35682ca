"""Render ordered attributes as HCL text.

The renderer is a pure function of its input: no I/O and no shared state, so
it is safe to call from any number of threads.

Layout rules:

* absent values emit nothing;
* scalars emit ``name = <literal>``;
* lists of scalars stay on one line (``a = ["b", "c", "d"]``), lists that
  contain lists or objects are written one element per line;
* mappings open ``name = {``, indent each key by one level, and close with
  ``}`` at the original indent, even when empty.

Mapping keys are assumed unique and non-empty; the renderer does not check.
"""

from collections.abc import Mapping
from typing import Any, Iterable, List, Tuple, Union

from ..errors import UnsupportedValueError
from .values import ValueKind, classify, format_key, format_scalar, quote_string

INDENT = "  "

Attributes = Union[Mapping, Iterable[Tuple[str, Any]]]


def _iter_attributes(attributes: Attributes):
    if isinstance(attributes, Mapping):
        return attributes.items()
    return attributes


def _inline_element(value: Any) -> str:
    if classify(value) is ValueKind.ABSENT:
        return "null"
    return format_scalar(value)


def _is_flat(values) -> bool:
    return all(classify(v) is ValueKind.ABSENT or classify(v).is_scalar for v in values)


def _expression_lines(value: Any, indent: str) -> List[str]:
    """Return the lines of a value expression.

    The first line carries no indent because it continues ``name = ``;
    following lines are fully indented.
    """
    kind = classify(value)

    if kind.is_scalar:
        return [format_scalar(value)]

    if kind is ValueKind.ABSENT:
        return ["null"]

    if kind is ValueKind.SEQUENCE:
        if not value:
            return ["[]"]
        if _is_flat(value):
            return ["[" + ", ".join(_inline_element(v) for v in value) + "]"]

        inner = indent + INDENT
        lines = ["["]
        for element in value:
            element_lines = _expression_lines(element, inner)
            element_lines[-1] += ","
            lines.append(inner + element_lines[0])
            lines.extend(element_lines[1:])
        lines.append(indent + "]")
        return lines

    # ValueKind.MAPPING
    inner = indent + INDENT
    lines = ["{"]
    for key, item in value.items():
        lines.extend(_attribute_lines(format_key(key), item, inner))
    lines.append(indent + "}")
    return lines


def _attribute_lines(name: str, value: Any, indent: str) -> List[str]:
    if classify(value) is ValueKind.ABSENT:
        return []
    expr = _expression_lines(value, indent)
    return [f"{indent}{name} = {expr[0]}"] + expr[1:]


def write_attr_line(name: str, value: Any, indent: str = "") -> str:
    """Render a single attribute as newline-terminated HCL.

    Returns an empty string for an absent value. Raises
    ``UnsupportedValueError`` naming the attribute when any part of *value*
    has an unsupported shape; nothing is emitted in that case.
    """
    try:
        lines = _attribute_lines(name, value, indent)
    except UnsupportedValueError as e:
        if e.attribute is None:
            raise UnsupportedValueError(e.value, attribute=name, **e.details) from e
        raise
    return "".join(line + "\n" for line in lines)


def render_attributes(attributes: Attributes, indent: str = "") -> str:
    """Render every attribute in order at *indent*.

    *attributes* is either a mapping or an iterable of ``(name, value)``
    pairs; iteration order is output order.
    """
    return "".join(write_attr_line(name, value, indent) for name, value in _iter_attributes(attributes))


def render_resource_block(resource_type: str, resource_name: str, attributes: Attributes) -> str:
    """Wrap rendered attributes in a ``resource "<type>" "<name>" { ... }`` block."""
    body = render_attributes(attributes, INDENT)
    return f"resource {quote_string(resource_type)} {quote_string(resource_name)} {{\n{body}}}\n"


def render_import_block(address: str, import_id: str) -> str:
    """Render a Terraform 1.5+ ``import`` block for *address*."""
    return f"import {{\n{INDENT}to = {address}\n{INDENT}id = {quote_string(import_id)}\n}}\n"
