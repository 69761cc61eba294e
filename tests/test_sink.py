import pickle
import threading

import pytest

from urlrequest import CompletionSink, Configuration, ResponseBuffer, ResponseFile, UsageError


def test_borrowing_sink_gets_a_released_read_only_view() -> None:
    seen = []

    def on_success(body) -> None:
        assert isinstance(body, memoryview)
        assert body.readonly
        seen.append(body)

    buffer = ResponseBuffer()
    buffer.write(b"ok")
    CompletionSink.borrowing(on_success).deliver(buffer)

    assert len(seen) == 1
    with pytest.raises(ValueError):
        bytes(seen[0])
    assert buffer.data == bytearray(b"ok")


def test_borrowed_body_kept_exported_is_a_usage_error() -> None:
    kept = []
    buffer = ResponseBuffer()
    buffer.write(b"ok")

    with pytest.raises(UsageError, match="CompletionSink.owning"):
        CompletionSink.borrowing(lambda body: kept.append(pickle.PickleBuffer(body))).deliver(buffer)

    assert bytes(kept[0].raw()) == b"ok"
    kept[0].release()


def test_owning_sink_takes_the_buffer() -> None:
    seen = []
    buffer = ResponseBuffer()
    buffer.write(b"ok")
    CompletionSink.owning(seen.append).deliver(buffer)

    assert seen == [bytearray(b"ok")]
    assert isinstance(seen[0], bytearray)
    assert len(buffer) == 0


def test_file_destination_delivers_empty_body(tmp_path) -> None:
    seen = []
    sink = CompletionSink.owning(seen.append, output_file=tmp_path / "out.bin")
    destination = sink.destination()
    assert isinstance(destination, ResponseFile)
    sink.deliver(destination)
    assert seen == [bytearray()]


def test_default_sink() -> None:
    sink = CompletionSink()
    assert sink.on_error is None
    assert sink.ownership == "borrow"
    assert isinstance(sink.destination(), ResponseBuffer)


def test_sink_validation() -> None:
    with pytest.raises(UsageError):
        CompletionSink(ownership="copy")  # type: ignore[arg-type]
    with pytest.raises(UsageError):
        CompletionSink(on_success="nope")  # type: ignore[arg-type]
    with pytest.raises(UsageError):
        CompletionSink(on_error=42)  # type: ignore[arg-type]


def test_configuration_defaults_and_cancel_flag() -> None:
    flag = threading.Event()
    config = Configuration(cancel_flag=flag)
    assert config.timeout is None
    assert config.transport == "stream"
    assert config.cancel_flag is flag
    assert Configuration().cancel_flag is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"timeout": -1},
        {"transport": "multi"},
        {"cancel_flag": object()},
    ],
)
def test_configuration_validation(kwargs) -> None:
    with pytest.raises(UsageError):
        Configuration(**kwargs)
