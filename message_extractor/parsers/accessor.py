from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..helper import field
from ..syntax import node_type


ACCESSOR_NAME = "say"
MARKUP_NAME = "Say"


class AccessorKind(Enum):
    NOT_ACCESSOR = "not-accessor"
    DIRECT = "direct"
    DESCRIPTOR_WRAPPED = "descriptor-wrapped"


@dataclass
class Accessor:
    kind: AccessorKind
    node: object = None
    descriptor: object = None
    method: Optional[str] = None

    def __bool__(self):
        return self.kind is not AccessorKind.NOT_ACCESSOR


NOT_ACCESSOR = Accessor(AccessorKind.NOT_ACCESSOR)


def classify_accessor(node):
    """
    Decide whether an expression resolves to the message accessor.

    Recognized: `say`, `<object>.say`, `say({...})` (descriptor object) and
    a method access on any of those (`say.plural`, `say({...}).select`).
    """
    kind = node_type(node)

    if kind == "Identifier" and node.name == ACCESSOR_NAME:
        return Accessor(AccessorKind.DIRECT, node)

    if kind == "CallExpression":
        inner = classify_accessor(node.callee)
        arguments = node.arguments or []
        if inner and inner.method is None and len(arguments) == 1 and \
                node_type(arguments[0]) == "ObjectExpression":
            return Accessor(AccessorKind.DESCRIPTOR_WRAPPED, inner.node,
                            arguments[0])
        return NOT_ACCESSOR

    if kind == "MemberExpression" and not node.computed:
        inner = classify_accessor(node.object)
        if inner:
            if inner.method is not None or \
                    node_type(node.property) != "Identifier":
                return NOT_ACCESSOR
            return Accessor(inner.kind, inner.node, inner.descriptor,
                            node.property.name)
        if node_type(node.property) == "Identifier" and \
                node.property.name == ACCESSOR_NAME:
            return Accessor(AccessorKind.DIRECT, node)

    return NOT_ACCESSOR


def classify_markup(opening):
    """
    Resolve `<Say>` and `<Say.Kind>` opening elements.

    Returns (accessor node, lower-cased kind or None) or None.
    """
    name = opening.name
    if node_type(name) == "JSXIdentifier" and name.name == MARKUP_NAME:
        return name, None

    if node_type(name) == "JSXMemberExpression" and \
            node_type(name.object) == "JSXIdentifier" and \
            name.object.name == MARKUP_NAME and \
            node_type(name.property) == "JSXIdentifier":
        return name.object, name.property.name.lower()

    return None


def descriptor_string(descriptor, key):
    """Value of `key` in a descriptor object, only if it is a string literal."""
    if descriptor is None:
        return None
    for prop in descriptor.properties or []:
        if node_type(prop) != "Property" or prop.computed:
            continue
        name = prop.key.name if node_type(prop.key) == "Identifier" \
            else field(prop.key, "value")
        if name != key:
            continue
        if node_type(prop.value) == "Literal" and \
                isinstance(prop.value.value, str):
            return prop.value.value
    return None


def attribute_name(attribute):
    name = attribute.name
    if node_type(name) == "JSXNamespacedName":
        return name.name.name
    return name.name


def attribute_string(attributes, key):
    """Value of a markup attribute, only if it is a string literal."""
    for attribute in attributes or []:
        if node_type(attribute) != "JSXAttribute" or \
                node_type(attribute.name) != "JSXIdentifier" or \
                attribute.name.name != key:
            continue
        value = attribute.value
        if node_type(value) == "Literal" and isinstance(value.value, str):
            return value.value
    return None
