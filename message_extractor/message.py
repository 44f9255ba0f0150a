from dataclasses import dataclass, field
from typing import List, Optional, Union


CHOICE_KINDS = ("select", "plural", "ordinal")


@dataclass
class LiteralMessage:
    text: str


@dataclass
class ArgumentMessage:
    """A placeholder rendered as `{identifier}`.

    `expression` is the syntax-tree node supplying the runtime value.
    """
    identifier: str
    expression: object = None


@dataclass
class ElementMessage:
    identifier: str
    children: list = field(default_factory=list)
    expression: object = None


@dataclass
class ChoiceBranch:
    key: str
    value: "Message"


@dataclass
class ChoiceMessage:
    """
    A variable-driven selection among sub-messages.

    Branches keep their source order; keys are plural categories, `other`,
    or exact-match numbers (rendered as `=n`).
    """
    kind: str
    identifier: str
    branches: List[ChoiceBranch] = field(default_factory=list)
    expression: object = None

    def branch(self, key):
        for branch in self.branches:
            if branch.key == key:
                return branch.value
        return None

    def has_other(self):
        return any(branch.key == "other" for branch in self.branches)


@dataclass
class CompositeMessage:
    """
    The top-level unit produced for one matched construct.

    Parameters:
        children: Ordered sub-messages
        context (str): Disambiguates otherwise identical text
        comments: TRANSLATORS: annotations in source order
        references: `file:line` provenance
        accessor: Syntax-tree node used to emit the runtime call
        id (str): Descriptor-supplied override for the hashed id
    """
    children: list = field(default_factory=list)
    context: Optional[str] = None
    comments: List[str] = field(default_factory=list)
    references: List[str] = field(default_factory=list)
    accessor: object = None
    id: Optional[str] = None

    def to_icu(self):
        from .icu import to_icu
        return to_icu(self)

    def message_id(self):
        from .identifier import generate_id
        if self.id:
            return self.id
        return generate_id(self.to_icu(), self.context)


Message = Union[LiteralMessage, ArgumentMessage, ElementMessage,
                ChoiceMessage, CompositeMessage]
