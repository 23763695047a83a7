"""Wire protocol of the remote key-value store.

Base endpoint `E`:

- read:   ``GET E/<key>`` -> raw value text, empty when the key is absent
- write:  ``POST E`` with form body ``<key>=<value>``
- delete: ``DELETE E/<key>``
- list:   ``GET E?encode=true&prefix`` -> URL-encoded, newline separated keys

Keys and values are percent-encoded without any safe characters.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import quote, unquote

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class Request:
    method: str
    url: str
    body: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


def encode_component(text: str) -> str:
    return quote(text, safe="")


def normalize_endpoint(url: str) -> str:
    return url.rstrip("/")


def read_request(endpoint: str, key: str) -> Request:
    return Request("GET", f"{endpoint}/{encode_component(key)}")


def write_request(endpoint: str, key: str, raw: str) -> Request:
    body = f"{encode_component(key)}={encode_component(raw)}"
    return Request("POST", endpoint, body=body, headers={"Content-Type": FORM_CONTENT_TYPE})


def delete_request(endpoint: str, key: str) -> Request:
    return Request("DELETE", f"{endpoint}/{encode_component(key)}")


def list_request(endpoint: str) -> Request:
    return Request("GET", f"{endpoint}?encode=true&prefix")


def parse_value(body: Optional[str]) -> Optional[str]:
    """Return the raw value, or None when the store had nothing for the key."""
    if not body:
        return None
    return body


def parse_key_listing(body: Optional[str]) -> List[str]:
    """Decode a key listing body into keys, in the order the store sent them."""
    if not body:
        return []
    return [k for k in unquote(body).split("\n") if k]
