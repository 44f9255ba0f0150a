from dataclasses import dataclass

from .helper import field, translator_comments
from .syntax import node_type


@dataclass
class Diagnostic:
    reference: str
    text: str

    def __str__(self):
        return f"{self.reference}: {self.text}"


class IdentifierAllocator:
    """
    Counter handing out fallback identifiers ("0", "1", ...).

    Scoped to one top-level match; `mark()`/`rollback()` undo allocations
    made by a nested parse that did not produce a message.
    """

    def __init__(self):
        self.current = 0

    def next(self):
        identifier = self.current
        self.current += 1
        return str(identifier)

    def mark(self):
        return self.current

    def rollback(self, mark):
        self.current = mark

    def reset(self):
        self.current = 0


# the leading-comment scan stops at these
BOUNDARY_TYPES = {
    "Program", "BlockStatement", "StaticBlock", "ClassBody",
    "FunctionDeclaration", "FunctionExpression", "ArrowFunctionExpression",
}


class ParseContext:
    def __init__(self, unit):
        self.unit = unit
        self.allocator = IdentifierAllocator()
        self.bindings = {"id": None}
        self.ancestors = []
        self.diagnostics = []

    def begin_message(self):
        self.allocator.reset()
        # `id` is the lookup key of the generated call
        self.bindings = {"id": None}

    def mark(self):
        return self.allocator.mark(), dict(self.bindings)

    def rollback(self, mark):
        counter, bindings = mark
        self.allocator.rollback(counter)
        self.bindings = bindings

    def key_for(self, node):
        """
        Binding name for an expression: its identifier name when it has
        one that is not already taken by a different expression, otherwise
        the next fallback identifier.
        """
        name = None
        if node_type(node) in ("Identifier", "JSXIdentifier"):
            name = node.name
        if name is not None:
            text = self.unit.text_of(node)
            if self.bindings.setdefault(name, text) == text:
                return name
        return self.allocator.next()

    def reference(self, node):
        return self.unit.reference(node)

    def translator_comments(self, node):
        comments = {}
        for current in [node] + list(reversed(self.ancestors)):
            if node_type(current) in BOUNDARY_TYPES:
                break
            for comment in self.unit.leading_comments(current):
                comments[field(comment, "range")[0]] = comment
        return translator_comments(comments[k] for k in sorted(comments))

    def warn(self, node, text):
        self.diagnostics.append(Diagnostic(self.reference(node), text))
