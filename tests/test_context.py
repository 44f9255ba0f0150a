from message_extractor.context import IdentifierAllocator, ParseContext
from message_extractor.syntax import parse_source


def test_allocator_counts_from_zero():
    allocator = IdentifierAllocator()
    assert [allocator.next() for _ in range(3)] == ["0", "1", "2"]


def test_allocator_rollback():
    allocator = IdentifierAllocator()
    allocator.next()
    mark = allocator.mark()
    allocator.next()
    allocator.next()
    allocator.rollback(mark)
    assert allocator.next() == "1"


def test_allocator_reset():
    allocator = IdentifierAllocator()
    allocator.next()
    allocator.next()
    allocator.reset()
    assert allocator.next() == "0"


def expression(unit, index):
    return unit.program.body[index].expression


def test_key_for_prefers_identifier_names():
    unit = parse_source("a.js", "count;\nuser.name;\n")
    context = ParseContext(unit)
    assert context.key_for(expression(unit, 0)) == "count"
    assert context.key_for(expression(unit, 0)) == "count"
    assert context.key_for(expression(unit, 1)) == "0"


def test_context_rollback_restores_bindings():
    unit = parse_source("a.js", "count;\n")
    context = ParseContext(unit)
    mark = context.mark()
    context.key_for(expression(unit, 0))
    context.allocator.next()
    context.rollback(mark)
    assert context.bindings == {"id": None}
    assert context.allocator.next() == "0"


def test_begin_message_resets_state():
    unit = parse_source("a.js", "count;\n")
    context = ParseContext(unit)
    context.key_for(expression(unit, 0))
    context.allocator.next()
    context.begin_message()
    assert context.bindings == {"id": None}
    assert context.allocator.next() == "0"
