from . import expression
from .accessor import classify_accessor, descriptor_string
from ..helper import field
from ..message import CompositeMessage, LiteralMessage


def quasi_text(quasi):
    cooked = field(quasi.value, "cooked")
    if cooked is None:
        return field(quasi.value, "raw") or ""
    return cooked


def parse_tagged_template(context, node):
    """
    Parse say`Hello ${name}!` (optionally say({ context: "..." })`...`).

    Template segments become literals, holes become arguments or nested
    messages.
    """
    accessor = classify_accessor(node.tag)
    if not accessor or accessor.method is not None:
        return None

    children = []
    expressions = node.quasi.expressions or []
    for i, quasi in enumerate(node.quasi.quasis):
        children.append(LiteralMessage(quasi_text(quasi)))
        if i < len(expressions):
            children.append(expression.parse_expression(
                context, expressions[i], fallback=True))

    return CompositeMessage(
        children,
        context=descriptor_string(accessor.descriptor, "context"),
        comments=context.translator_comments(node),
        references=[context.reference(node)],
        accessor=accessor.node,
        id=descriptor_string(accessor.descriptor, "id"))
