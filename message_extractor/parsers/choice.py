from . import expression
from .accessor import classify_accessor, descriptor_string
from ..helper import field
from ..icu import format_number
from ..message import (CHOICE_KINDS, ChoiceBranch, ChoiceMessage,
                       CompositeMessage)
from ..syntax import node_type


def property_key(context, prop):
    key = prop.key
    if not prop.computed:
        if node_type(key) == "Identifier":
            return key.name
        value = field(key, "value")
        if node_type(key) == "Literal" and isinstance(value, str):
            return value
        if node_type(key) == "Literal" and \
                isinstance(value, (int, float)) and \
                not isinstance(value, bool):
            return format_number(value)
    return context.allocator.next()


def parse_call_expression(context, node):
    """
    Parse say.plural(count, { one: "...", other: "..." }) and its
    `select`/`ordinal` siblings into a single choice.
    """
    accessor = classify_accessor(node.callee)
    if not accessor or accessor.method not in CHOICE_KINDS:
        return None

    arguments = node.arguments or []
    if len(arguments) != 2:
        context.warn(node, f"say.{accessor.method}() takes a value and an "
                     f"options object, got {len(arguments)} argument(s)")
        return None
    value, options = arguments
    if node_type(value) == "SpreadElement" or \
            node_type(options) != "ObjectExpression":
        context.warn(node, f"say.{accessor.method}() options must be an "
                     "object literal")
        return None

    identifier = context.key_for(value)
    branches = []
    for prop in options.properties or []:
        if node_type(prop) != "Property" or prop.kind != "init" or \
                prop.method:
            continue
        key = property_key(context, prop)
        branches.append(
            ChoiceBranch(key, expression.parse_value(context, prop.value)))

    choice = ChoiceMessage(accessor.method, identifier, branches, value)
    if not choice.has_other():
        context.warn(node, f"say.{accessor.method}() has no \"other\" branch")
        return None

    return CompositeMessage(
        [choice],
        context=descriptor_string(accessor.descriptor, "context"),
        comments=context.translator_comments(node),
        references=[context.reference(node)],
        accessor=accessor.node,
        id=descriptor_string(accessor.descriptor, "id"))
