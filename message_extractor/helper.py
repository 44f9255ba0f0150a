import logging
import re


TRANSLATORS_MARKER = re.compile(r"^[\s*]*translators:\s*(.*?)\s*$",
                                re.IGNORECASE)


def field(value, name):
    """Attribute or key lookup; esprima uses both for nested values."""
    if isinstance(value, dict):
        return value.get(name)
    return getattr(value, name, None)


def translator_comments(comments):
    """Lines of the given comments that start with TRANSLATORS:"""
    result = []
    for comment in comments:
        for line in str(field(comment, "value")).splitlines():
            match = TRANSLATORS_MARKER.match(line)
            if match and match.group(1):
                result.append(match.group(1))
    return result


def collapse_whitespace(text):
    return re.sub(r"\s+", " ", text)


def append_unique(items, new_items):
    for item in new_items:
        if item not in items:
            items.append(item)
    return items


def configure_logging(verbose=False, quiet=False):
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level,
                        format="%(levelname)s | %(name)s | %(message)s")
