from .parsers.choice import parse_call_expression
from .parsers.markup import parse_markup_element
from .parsers.template import parse_tagged_template


parsers = {
    "CallExpression": parse_call_expression,
    "JSXElement": parse_markup_element,
    "TaggedTemplateExpression": parse_tagged_template,
}


def parse_node(context, node):
    """
    Try to read a message from a syntax-tree node.

    Returns the CompositeMessage, or None when the node is not a message
    construct (or a malformed one, which leaves a diagnostic behind).
    """
    node_type = getattr(node, "type", None)
    if node_type not in parsers:
        return None
    return parsers[node_type](context, node)
