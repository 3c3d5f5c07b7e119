import pytest

from jarvis.services.ingress_service import DeterministicIngressService, EmptyUtteranceError


def test_build_envelope_collapses_whitespace() -> None:
    service = DeterministicIngressService()

    envelope = service.build_envelope(
        function="jarvis-ai",
        trace_id="trace_1",
        message="  What   time\n is it?  ",
    )

    assert envelope.function == "jarvis-ai"
    assert envelope.trace_id == "trace_1"
    assert envelope.text == "What time is it?"


def test_build_envelope_truncates_long_text() -> None:
    service = DeterministicIngressService()

    envelope = service.build_envelope(function="jarvis-ai", trace_id="t", message="a" * 5000)

    assert len(envelope.text) == service.max_length


@pytest.mark.parametrize("message", ["", "   ", "\n\t", None, 42])
def test_build_envelope_rejects_missing_text(message: object) -> None:
    service = DeterministicIngressService()

    with pytest.raises(EmptyUtteranceError, match="No message provided"):
        service.build_envelope(function="jarvis-ai", trace_id="t", message=message)
