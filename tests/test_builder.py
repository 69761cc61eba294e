import pytest

from urlrequest import BuilderState, RequestBuilder, SecureCommunication, UsageError, Verb
from urlrequest.errors import ConnectionError
from urlrequest.sink import ResponseBuffer, ResponseFile
from urlrequest.transport.base import PreparedRequest, Transport, TransportResponse


class DummyTransport:
    kind: Transport.Kind = "stream"

    def __init__(self, *, error: Exception | None = None) -> None:
        self.destination = ResponseBuffer()
        self.error = error
        self.requests: list[PreparedRequest] = []
        self.closed = 0

    def exchange(self, request: PreparedRequest) -> TransportResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        self.destination.write(b"ok")
        return TransportResponse(status=200, destination=self.destination)

    def close(self) -> None:
        self.closed += 1


def test_steps_chain_and_only_execute_dispatches() -> None:
    transport = DummyTransport()
    builder = (
        RequestBuilder.builder(Verb.POST, transport)
        .timeout(5)
        .append_headers({"X-A": "1"})
        .post_data(b"body")
        .url("http://example.test/items", SecureCommunication(verify_peer=False))
        .user_agent("agent/1")
        .append_headers([("X-A", "2")])
    )
    assert builder.state is BuilderState.CONFIGURING
    assert transport.requests == []

    response = builder.execute()

    assert response.status == 200
    assert builder.state is BuilderState.SUCCEEDED
    sent = transport.requests[0]
    assert sent.method == "POST"
    assert sent.url == "http://example.test/items"
    assert sent.headers == (("X-A", "1"), ("X-A", "2"))
    assert sent.body == b"body"
    assert sent.timeout == 5
    assert sent.user_agent == "agent/1"
    assert sent.secure.verify_peer is False
    assert transport.closed == 1


def test_download_is_sent_as_get() -> None:
    transport = DummyTransport()
    RequestBuilder.builder(Verb.DOWNLOAD, transport).url("http://example.test/file").execute()
    assert transport.requests[0].method == "GET"
    assert transport.requests[0].body is None


@pytest.mark.parametrize("verb", [Verb.GET, Verb.DELETE, Verb.DOWNLOAD])
def test_body_less_verbs_reject_post_data(verb: Verb) -> None:
    builder = RequestBuilder.builder(verb, DummyTransport())
    with pytest.raises(UsageError):
        builder.post_data(b"x")


def test_execute_without_url_is_a_usage_error() -> None:
    transport = DummyTransport()
    with pytest.raises(UsageError):
        RequestBuilder.builder(Verb.GET, transport).execute()
    assert transport.requests == []


def test_builder_is_one_shot() -> None:
    builder = RequestBuilder.builder(Verb.GET, DummyTransport()).url("http://example.test")
    builder.execute()
    with pytest.raises(UsageError):
        builder.execute()
    with pytest.raises(UsageError):
        builder.timeout(1)


def test_failed_execution_is_terminal_and_releases_transport() -> None:
    transport = DummyTransport(error=ConnectionError("refused"))
    builder = RequestBuilder.builder(Verb.GET, transport).url("http://example.test")
    with pytest.raises(ConnectionError):
        builder.execute()
    assert builder.state is BuilderState.FAILED
    assert transport.closed == 1
    with pytest.raises(UsageError):
        builder.execute()


def test_unix_socket_path_and_output_file(tmp_path) -> None:
    transport = DummyTransport()
    target = tmp_path / "out.bin"
    (
        RequestBuilder.builder(Verb.DOWNLOAD, transport)
        .url("http://localhost/file")
        .unix_socket_path(tmp_path / "agent.sock")
        .output_file(target)
    )
    assert isinstance(transport.destination, ResponseFile)
    assert transport.destination.path == target


def test_verb_flags() -> None:
    assert [v for v in Verb if v.carries_body] == [Verb.POST, Verb.PUT, Verb.PATCH]
    assert Verb("PATCH").method == "PATCH"
