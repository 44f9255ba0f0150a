import re

from .message import (ArgumentMessage, ChoiceMessage, CompositeMessage,
                      ElementMessage, LiteralMessage)


# same numeric forms JavaScript's unary plus accepts for branch keys
NUMERIC_KEY = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")

CHOICE_FORMATS = {
    "select": "select",
    "plural": "plural",
    "ordinal": "selectordinal",
}


def format_number(value):
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def format_branch_key(key):
    if NUMERIC_KEY.match(key):
        return "=" + format_number(key)
    return key


def _convert(message):
    if isinstance(message, LiteralMessage):
        return str(message.text)

    if isinstance(message, ArgumentMessage):
        return "{" + message.identifier + "}"

    if isinstance(message, ElementMessage):
        if not message.children:
            return f"<{message.identifier}/>"
        children = "".join(_convert(m) for m in message.children)
        return f"<{message.identifier}>{children}</{message.identifier}>"

    if isinstance(message, ChoiceMessage):
        branches = "".join(
            f"  {format_branch_key(b.key)} {{{_convert(b.value)}}}\n"
            for b in message.branches)
        format_name = CHOICE_FORMATS.get(message.kind, message.kind)
        return f"{{{message.identifier}, {format_name},\n{branches}}}"

    if isinstance(message, CompositeMessage):
        return "".join(_convert(m) for m in message.children)

    raise TypeError(f"Unknown message type {type(message).__name__}")


def to_icu(message):
    """
    Render a message tree as ICU MessageFormat text.

    Branch and child order is kept as-is; only the outermost result is
    trimmed.
    """
    return _convert(message).strip()
