from . import expression
from .accessor import attribute_name, attribute_string, classify_markup
from ..helper import collapse_whitespace
from ..message import (CHOICE_KINDS, ArgumentMessage, ChoiceBranch,
                       ChoiceMessage, CompositeMessage, ElementMessage,
                       LiteralMessage)
from ..syntax import node_type


RESERVED_ATTRIBUTES = ("_", "id", "context")


def parse_markup_children(context, children):
    messages = []
    for child in children or []:
        kind = node_type(child)
        message = None
        if kind == "JSXText":
            message = LiteralMessage(collapse_whitespace(child.value))
        elif kind == "JSXElement":
            message = parse_markup_element(context, child, fallback=True)
        elif kind == "JSXFragment":
            message = ElementMessage(context.allocator.next(), [], child)
        elif kind == "JSXExpressionContainer":
            if node_type(child.expression) != "JSXEmptyExpression":
                message = ArgumentMessage(
                    context.key_for(child.expression), child.expression)
        if message is not None:
            messages.append(message)
    return messages


def parse_markup_container(context, element):
    """Parse <Say>Hello <b>{name}</b>!</Say>."""
    match = classify_markup(element.openingElement)
    if match is None:
        return None
    accessor, kind = match
    if kind is not None:
        return None

    attributes = element.openingElement.attributes
    return CompositeMessage(
        parse_markup_children(context, element.children),
        context=attribute_string(attributes, "context"),
        comments=context.translator_comments(element),
        references=[context.reference(element)],
        accessor=accessor,
        id=attribute_string(attributes, "id"))


def branch_key(attribute):
    key = attribute_name(attribute)
    # `_1` stands for the exact-match key `1`
    if key.startswith("_") and key[1:].isdigit():
        return key[1:]
    return key


def parse_attribute_value(context, value):
    kind = node_type(value)
    if kind == "JSXExpressionContainer":
        value = value.expression
        kind = node_type(value)
        if kind == "JSXEmptyExpression":
            return None
    if kind == "JSXElement":
        return parse_markup_element(context, value, fallback=True)
    if kind == "JSXFragment":
        return ElementMessage(context.allocator.next(), [], value)
    return expression.parse_value(context, value)


def choice_value(attributes):
    for attribute in attributes or []:
        if node_type(attribute) == "JSXAttribute" and \
                attribute_name(attribute) == "_":
            value = attribute.value
            if node_type(value) == "JSXExpressionContainer":
                value = value.expression
            if value is None or node_type(value) == "JSXEmptyExpression":
                return None
            return value
    return None


def parse_markup_choice(context, element):
    """Parse <Say.Plural _={count} one="..." other="..." />."""
    match = classify_markup(element.openingElement)
    if match is None:
        return None
    accessor, kind = match
    if kind not in CHOICE_KINDS:
        return None

    attributes = element.openingElement.attributes
    value = choice_value(attributes)
    if value is None:
        context.warn(element, f"<Say.{kind}> needs a value in its _ attribute")
        return None

    identifier = context.key_for(value)
    branches = []
    for attribute in attributes or []:
        if node_type(attribute) != "JSXAttribute" or \
                attribute.value is None or \
                attribute_name(attribute) in RESERVED_ATTRIBUTES:
            continue
        message = parse_attribute_value(context, attribute.value)
        if message is not None:
            branches.append(ChoiceBranch(branch_key(attribute), message))

    choice = ChoiceMessage(kind, identifier, branches, value)
    if not choice.has_other():
        context.warn(element, f"<Say.{kind}> has no \"other\" branch")
        return None

    return CompositeMessage(
        [choice],
        context=attribute_string(attributes, "context"),
        comments=context.translator_comments(element),
        references=[context.reference(element)],
        accessor=accessor,
        id=attribute_string(attributes, "id"))


def parse_markup_element(context, element, fallback=False):
    """
    Parse a markup element.

    With `fallback`, markup that is not a message itself is kept as an
    element of the enclosing message; its identifier is taken before its
    children so numbering follows source order.
    """
    mark = context.mark()
    if element.openingElement.selfClosing:
        message = parse_markup_choice(context, element)
    else:
        message = parse_markup_container(context, element)

    if message is not None:
        return expression.inline(message) if fallback else message
    context.rollback(mark)
    if not fallback:
        return None

    identifier = context.allocator.next()
    if element.openingElement.selfClosing:
        return ElementMessage(identifier, [], element)
    return ElementMessage(
        identifier, parse_markup_children(context, element.children), element)
