import asyncio

import pytest

from kvclient_lib.errors import TransportError
from kvclient_lib.transport import protocol
from kvclient_lib.transport.memory import MemoryTransport

E = 'https://kv.example.test/v0/token'


def test_memory_transport_speaks_the_wire_protocol():
    t = MemoryTransport()
    assert t.send(protocol.read_request(E, 'a b')) == ''

    t.send(protocol.write_request(E, 'a b', '{"x": "1&2"}'))
    assert t.data == {'a b': '{"x": "1&2"}'}
    assert t.send(protocol.read_request(E, 'a b')) == '{"x": "1&2"}'

    t.send(protocol.write_request(E, 'c', '2'))
    listing = t.send(protocol.list_request(E))
    assert protocol.parse_key_listing(listing) == ['a b', 'c']

    t.send(protocol.delete_request(E, 'a b'))
    assert list(t.data) == ['c']


def test_memory_transport_records_calls():
    t = MemoryTransport({'k': '1'})
    asyncio.run(t.send_async(protocol.read_request(E, 'k')))
    t.send(protocol.delete_request(E, 'k'))
    assert [c.method for c in t.calls] == ['GET', 'DELETE']
    assert t.count('GET') == 1
    assert t.count() == 2
    t.reset_calls()
    assert t.count() == 0


def test_memory_transport_injected_failure():
    t = MemoryTransport()
    t.fail_on = lambda r: r.method == 'POST'
    with pytest.raises(TransportError):
        t.send(protocol.write_request(E, 'k', '1'))
    assert t.data == {}
