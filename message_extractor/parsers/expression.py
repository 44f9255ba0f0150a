from . import choice, template
from ..icu import format_number
from ..message import (ArgumentMessage, ChoiceMessage, CompositeMessage,
                       LiteralMessage)
from ..syntax import node_type


def inline(message):
    """A nested composite holding a single choice is embedded as the choice."""
    if isinstance(message, CompositeMessage) and \
            len(message.children) == 1 and \
            isinstance(message.children[0], ChoiceMessage):
        return message.children[0]
    return message


def parse_expression(context, node, fallback=False):
    """
    Parse an embedded expression.

    Nested templates and choice calls become sub-messages. Anything else
    becomes an argument when `fallback` is set, otherwise None. A nested
    construct that does not parse gives back the identifiers it used.
    """
    mark = context.mark()
    message = None
    kind = node_type(node)
    if kind == "TaggedTemplateExpression":
        message = template.parse_tagged_template(context, node)
    elif kind == "CallExpression":
        message = choice.parse_call_expression(context, node)

    if message is not None:
        return inline(message)

    context.rollback(mark)
    if fallback:
        return ArgumentMessage(context.key_for(node), node)
    return None


def literal_text(node):
    """Text of a string/number literal or of a template without holes."""
    kind = node_type(node)
    if kind == "Literal":
        value = node.value
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return format_number(value)
    if kind == "TemplateLiteral" and not node.expressions:
        return "".join(template.quasi_text(q) for q in node.quasis)
    return None


def parse_value(context, node):
    """Branch value: literal text, nested message or argument."""
    text = literal_text(node)
    if text is not None:
        return LiteralMessage(text)
    return parse_expression(context, node, fallback=True)
