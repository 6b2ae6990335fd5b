"""Gate Composition — chain ordering and fault classification.

Tests cover:
    - chain() makes the first gate the outermost
    - a gate that short-circuits prevents every later gate from running
    - classify_fault distinguishes typed errors, message-bearing and bare exceptions
"""

from capture.api.gates import chain, classify_fault
from capture.core.errors import ErrorCategory, PersistenceError


def _recording_gate(name, log, stop=False):
    def gate(next_handler):
        async def handler(request):
            log.append(name)
            if stop:
                return f"stopped at {name}"
            return await next_handler(request)
        return handler
    return gate


async def test_chain_runs_gates_outermost_first():
    log = []

    async def inner(request):
        log.append("handler")
        return "ok"

    handler = chain(inner, _recording_gate("a", log), _recording_gate("b", log))
    assert await handler(None) == "ok"
    assert log == ["a", "b", "handler"]


async def test_short_circuit_stops_later_gates():
    log = []

    async def inner(request):
        log.append("handler")
        return "ok"

    handler = chain(
        inner,
        _recording_gate("a", log),
        _recording_gate("b", log, stop=True),
        _recording_gate("c", log),
    )
    assert await handler(None) == "stopped at b"
    assert log == ["a", "b"]


def test_classify_typed_error():
    category, detail = classify_fault(PersistenceError("database offline", "insert"))
    assert category is ErrorCategory.PERSISTENCE
    assert "database offline" in detail


def test_classify_message_exception():
    assert classify_fault(RuntimeError("boom")) == (ErrorCategory.INTERNAL, "boom")


def test_classify_unknown_exception():
    category, detail = classify_fault(RuntimeError())
    assert category is ErrorCategory.INTERNAL
    assert detail == "Unknown error (RuntimeError)"
