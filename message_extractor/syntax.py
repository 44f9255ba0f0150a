"""
Thin adapter over the ESTree nodes produced by esprima.

Parsers and generators only rely on what is exposed here: node type
names, children in source order, exact source slices and positions.
"""
import os
import re

import esprima
from esprima.error_handler import Error as EsprimaError

from .errors import SourceParseError
from .helper import field


SUPPORTED_EXTENSIONS = (".js", ".mjs", ".cjs", ".jsx")

NON_CHILD_KEYS = {"type", "range", "loc", "leadingComments",
                  "trailingComments", "innerComments", "comments"}

WHITESPACE_GAP = re.compile(r"\s*")
# `{/* comment */}` inside markup children
MARKUP_COMMENT_GAP = re.compile(r"\s*\}\s*")


def is_node(value):
    return isinstance(getattr(value, "type", None), str) and \
        getattr(value, "range", None) is not None


def node_type(node):
    return getattr(node, "type", None)


def iter_child_nodes(node):
    """Direct children of a node, in source order."""
    children = []
    seen = set()
    for key, value in vars(node).items():
        if key in NON_CHILD_KEYS:
            continue
        values = value if isinstance(value, list) else [value]
        for child in values:
            if is_node(child) and id(child) not in seen:
                seen.add(id(child))
                children.append(child)
    children.sort(key=lambda child: child.range[0])
    return children


def is_supported(path):
    return str(path).endswith(SUPPORTED_EXTENSIONS)


class SourceUnit:
    def __init__(self, path, code, program, comments, root=None):
        self.path = str(path)
        self.code = code
        self.program = program
        self.comments = sorted(comments, key=lambda c: field(c, "range")[0])
        self.root = root

    def text_of(self, node):
        start, end = node.range
        return self.code[start:end]

    def line_of(self, node):
        return self.code.count("\n", 0, node.range[0]) + 1

    def relative_path(self):
        root = self.root if self.root is not None else os.getcwd()
        path = self.path
        if os.path.isabs(path) or os.path.isabs(root):
            path = os.path.relpath(os.path.abspath(path),
                                   os.path.abspath(root))
        return path.replace(os.sep, "/")

    def reference(self, node):
        return f"{self.relative_path()}:{self.line_of(node)}"

    def leading_comments(self, node):
        """Comments directly in front of a node, in source order."""
        position = node.range[0]
        found = []
        for comment in reversed(self.comments):
            start, end = field(comment, "range")
            if end > position:
                continue
            gap = self.code[end:position]
            if WHITESPACE_GAP.fullmatch(gap):
                found.append(comment)
                position = start
            elif MARKUP_COMMENT_GAP.fullmatch(gap) and \
                    self.code[:start].rstrip().endswith("{"):
                found.append(comment)
                position = self.code.rindex("{", 0, start)
            else:
                break
        found.reverse()
        return found


def parse_source(path, code, root=None):
    """
    Parse one JavaScript/JSX file.

    Returns None for files the parser does not handle.
    """
    if not is_supported(path):
        return None
    try:
        program = esprima.parseModule(code, {
            "jsx": True,
            "range": True,
            "loc": True,
            "comment": True,
        })
    except EsprimaError as E:
        raise SourceParseError(
            path, getattr(E, "lineNumber", None) or "?",
            getattr(E, "description", None) or str(E)) from E
    return SourceUnit(path, code, program,
                      getattr(program, "comments", None) or [], root=root)
