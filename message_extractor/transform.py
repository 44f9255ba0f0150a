"""
Walk a parsed source file, collect its messages and optionally rewrite
each matched construct into a runtime lookup.
"""
import logging
from dataclasses import dataclass, field
from typing import List

from .context import ParseContext
from .generator import generate_replacement
from .parser import parse_node, parsers
from .syntax import iter_child_nodes, node_type, parse_source


log = logging.getLogger(__name__)


@dataclass
class Replacement:
    start: int
    end: int
    code: str


@dataclass
class ExtractResult:
    messages: list = field(default_factory=list)
    diagnostics: list = field(default_factory=list)


class Visitor:
    """
    Depth-first walk over one source unit.

    A node that parses as a message is consumed whole: its subtree is not
    visited again. `observer` is called with every message found; with
    `rewrite` set, a Replacement is recorded for each of them.
    """

    def __init__(self, unit, observer=None, rewrite=False):
        self.unit = unit
        self.context = ParseContext(unit)
        self.observer = observer
        self.rewrite = rewrite
        self.replacements: List[Replacement] = []

    def run(self):
        self.visit(self.unit.program)
        return self

    def visit(self, node):
        if node_type(node) in parsers:
            self.context.begin_message()
            message = parse_node(self.context, node)
            if message is not None:
                self.found(message, node)
                return

        self.context.ancestors.append(node)
        try:
            for child in iter_child_nodes(node):
                self.visit(child)
        finally:
            self.context.ancestors.pop()

    def found(self, message, node):
        if self.observer is not None:
            self.observer(message)
        if self.rewrite:
            start, end = node.range
            self.replacements.append(Replacement(
                start, end, generate_replacement(message, self.unit, node)))


def apply_replacements(code, replacements):
    """Splice replacements into the source, last one first."""
    for replacement in sorted(replacements, key=lambda r: r.start,
                              reverse=True):
        code = code[:replacement.start] + replacement.code + \
            code[replacement.end:]
    return code


def extract_messages(path, code, root=None):
    unit = parse_source(path, code, root=root)
    if unit is None:
        return ExtractResult()
    messages = []
    visitor = Visitor(unit, observer=messages.append).run()
    log.debug(f"{path}: {len(messages)} message(s)")
    return ExtractResult(messages, visitor.context.diagnostics)


def transform_code(path, code, root=None):
    """Source with every message construct replaced by its runtime call."""
    unit = parse_source(path, code, root=root)
    if unit is None:
        return code
    visitor = Visitor(unit, rewrite=True).run()
    return apply_replacements(code, visitor.replacements)
