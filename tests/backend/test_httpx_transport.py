"""Client running over the real httpx transport against a mocked service."""
import asyncio
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import unquote, urlsplit

import httpx
import pytest

from kvclient_lib.client import Client
from kvclient_lib.errors import TransportError
from kvclient_lib.transport.httpx_transport import HttpxTransport
from kvclient_lib.transport.protocol import Request, encode_component

E = 'https://kv.example.test/v0/token'


class FakeKVService:
    """Mimics the remote store: 404 for unknown keys, URL-encoded listings."""

    def __init__(self):
        self.data = {}
        self.requests = []

    def _key(self, request):
        return unquote(urlsplit(str(request.url)).path.rsplit('/', 1)[-1])

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == 'GET':
            if 'prefix' in request.url.params:
                return httpx.Response(200, text='\n'.join(encode_component(k) for k in self.data))
            key = self._key(request)
            if key not in self.data:
                return httpx.Response(404, text='')
            return httpx.Response(200, text=self.data[key])
        if request.method == 'POST':
            assert request.headers['content-type'] == 'application/x-www-form-urlencoded'
            k, _, v = request.content.decode('utf-8').partition('=')
            self.data[unquote(k)] = unquote(v)
            return httpx.Response(200)
        if request.method == 'DELETE':
            self.data.pop(self._key(request), None)
            return httpx.Response(204)
        return httpx.Response(405)


@pytest.fixture
def service():
    return FakeKVService()


@pytest.fixture
def http_transport(service):
    mock = httpx.MockTransport(service.handler)
    return HttpxTransport(
        client=httpx.Client(transport=mock),
        async_client=httpx.AsyncClient(transport=mock),
    )


def test_blocking_client_over_http(service, http_transport):
    with Client(endpoint_url=E + '/', transport=http_transport) as c:
        assert c.get_sync('a b') is None
        c.set_sync('a b', {'x': 'y&z'})
        assert service.data == {'a b': '{"x": "y&z"}'}
        assert c.get_sync('a b', force=True) == {'x': 'y&z'}
        assert c.keys_sync() == ['a b']
        assert c.delete_sync('a b') is True
        assert c.delete_sync('a b') is False
        assert service.data == {}

    methods = [r.method for r in service.requests]
    assert methods == ['GET', 'POST', 'GET', 'GET', 'GET', 'DELETE', 'GET']
    assert str(service.requests[0].url) == E + '/a%20b'


def test_async_client_over_http(service, http_transport):
    async def scenario():
        async with Client(endpoint_url=E, transport=http_transport) as c:
            await c.set('n', 42)
            await c.set('m', [1, 2])
            assert await c.keys() == ['n', 'm']
            assert await c.to_dict() == {'n': 42, 'm': [1, 2]}
            await c.clear()
            return await c.get_size()

    assert asyncio.run(scenario()) == 0
    assert service.data == {}


def test_error_status_becomes_transport_error():
    def handler(request):
        return httpx.Response(500, text='boom')

    mock = httpx.MockTransport(handler)
    t = HttpxTransport(client=httpx.Client(transport=mock), async_client=httpx.AsyncClient(transport=mock))
    req = Request('POST', E, body='k=v')

    with pytest.raises(TransportError) as exc:
        t.send(req)
    assert exc.value.status_code == 500
    assert exc.value.url == E

    with pytest.raises(TransportError):
        asyncio.run(t.send_async(req))


def test_missing_key_is_not_an_error_but_missing_delete_target_is():
    def handler(request):
        return httpx.Response(404)

    mock = httpx.MockTransport(handler)
    t = HttpxTransport(client=httpx.Client(transport=mock))
    assert t.send(Request('GET', E + '/k')) == ''
    with pytest.raises(TransportError):
        t.send(Request('DELETE', E + '/k'))


def test_connection_failure_becomes_transport_error():
    def handler(request):
        raise httpx.ConnectError('connection refused', request=request)

    mock = httpx.MockTransport(handler)
    t = HttpxTransport(client=httpx.Client(transport=mock), async_client=httpx.AsyncClient(transport=mock))
    c = Client(endpoint_url=E, transport=t)
    with pytest.raises(TransportError):
        c.get_sync('k')
    with pytest.raises(TransportError):
        asyncio.run(c.keys())
    assert len(c.cache) == 0


def test_close_releases_clients(http_transport):
    http_transport.client
    http_transport.close()
    assert http_transport._client is None
    asyncio.run(http_transport.aclose())
    assert http_transport._async_client is None


class _ValueHandler(BaseHTTPRequestHandler):
    """Answers every GET with the JSON string "x" over a keep-alive connection."""

    protocol_version = 'HTTP/1.1'

    def do_GET(self):
        body = b'"x"'
        self.send_response(200)
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def local_server():
    server = ThreadingHTTPServer(('127.0.0.1', 0), _ValueHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f'http://127.0.0.1:{server.server_address[1]}/db'
    server.shutdown()
    server.server_close()


def test_async_calls_from_successive_event_loops(local_server):
    c = Client(endpoint_url=local_server, transport=HttpxTransport(timeout=5))
    assert asyncio.run(c.get('a', force=True)) == 'x'
    first = c.transport._async_client
    assert asyncio.run(c.get('a', force=True)) == 'x'
    assert c.transport._async_client is not first
    assert c.get_sync('a', force=True) == 'x'
    c.close()
    assert c.transport._client is None
    assert c.transport._async_client is None


def test_async_context_manager_closes_both_clients(local_server):
    t = HttpxTransport(timeout=5)

    async def scenario():
        async with Client(endpoint_url=local_server, transport=t) as c:
            return await c.get('a', force=True)

    t.client
    assert asyncio.run(scenario()) == 'x'
    assert t._async_client is None
    assert t._client is None


def test_malformed_endpoint_becomes_transport_error(service, http_transport):
    c = Client(endpoint_url='http://kv.example\x00.test/db', transport=http_transport)
    with pytest.raises(TransportError):
        c.get_sync('k')
    with pytest.raises(TransportError):
        asyncio.run(c.keys())
    assert service.requests == []
