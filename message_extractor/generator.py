import json
import re

from .message import (ArgumentMessage, ChoiceMessage, CompositeMessage,
                      ElementMessage)
from .syntax import node_type


IDENTIFIER_NAME = re.compile(r"^[A-Za-z_$][\w$]*$")


def child_bindings(messages):
    """
    Flatten a message tree into (identifier, expression, is_element) triples.

    Literals are part of the ICU text and are not passed at runtime. The
    content of an element is in the text too, so only its tag is passed.
    """
    bindings = []
    for message in messages:
        if isinstance(message, ArgumentMessage):
            bindings.append((message.identifier, message.expression, False))
        elif isinstance(message, ElementMessage):
            bindings.append((message.identifier, message.expression, True))
            bindings.extend(child_bindings(message.children))
        elif isinstance(message, ChoiceMessage):
            bindings.append((message.identifier, message.expression, False))
            bindings.extend(child_bindings(
                [branch.value for branch in message.branches]))
        elif isinstance(message, CompositeMessage):
            bindings.extend(child_bindings(message.children))
    return bindings


def collect_bindings(message):
    seen = set()
    result = []
    for identifier, expression, is_element in child_bindings(
            message.children):
        if identifier in seen or expression is None:
            continue
        seen.add(identifier)
        result.append((identifier, expression, is_element))
    return result


def expression_text(unit, node, is_element=False):
    """Source text of a binding value; element bindings lose their children."""
    kind = node_type(node)
    if is_element and kind == "JSXElement":
        if node.closingElement is None:
            return unit.text_of(node.openingElement)
        return unit.text_of(node.openingElement) + \
            unit.text_of(node.closingElement)
    if is_element and kind == "JSXFragment":
        return "<></>"
    if kind == "SequenceExpression":
        return f"({unit.text_of(node)})"
    return unit.text_of(node)


def generate_call(message, unit):
    """say`Hello ${name}` -> say.call({ id: "...", name: name })"""
    properties = [f"id: {json.dumps(message.message_id())}"]
    for identifier, expression, is_element in collect_bindings(message):
        key = identifier if IDENTIFIER_NAME.match(identifier) \
            else json.dumps(identifier)
        properties.append(
            f"{key}: {expression_text(unit, expression, is_element)}")
    accessor = unit.text_of(message.accessor)
    return f"{accessor}.call({{ {', '.join(properties)} }})"


def generate_element(message, unit):
    """<Say>Hello {name}</Say> -> <Say id={"..."} name={name} />"""
    attributes = [f"id={{{json.dumps(message.message_id())}}}"]
    for identifier, expression, is_element in collect_bindings(message):
        # markup attribute names cannot start with a digit
        name = f"_{identifier}" if identifier[:1].isdigit() else identifier
        attributes.append(
            f"{name}={{{expression_text(unit, expression, is_element)}}}")
    accessor = unit.text_of(message.accessor)
    return f"<{accessor} {' '.join(attributes)} />"


generators = {
    "CallExpression": generate_call,
    "JSXElement": generate_element,
    "TaggedTemplateExpression": generate_call,
}


def generate_replacement(message, unit, node):
    """Source text replacing the matched node with a runtime lookup."""
    return generators[node_type(node)](message, unit)
