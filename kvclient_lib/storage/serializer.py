from typing import Any, Optional, Protocol
import json

from kvclient_lib.errors import ParseError, SerializeError


class Serializer(Protocol):
    """Serialize/deserialize values to the text stored remotely.

    Implementations should be symmetric: `dump` -> str, `load` <- str, and
    raise `SerializeError`/`ParseError` rather than library exceptions.
    """

    def dump(self, value: Any, key: Optional[str] = None) -> str: ...

    def load(self, text: str, key: Optional[str] = None) -> Any: ...


class JSONSerializer:
    """Serializer using JSON (text). Values must be JSON-representable.

    NaN and infinities are rejected since other clients of the store could
    not read them back.
    """

    def dump(self, value: Any, key: Optional[str] = None) -> str:
        try:
            return json.dumps(value, allow_nan=False)
        except (TypeError, ValueError) as err:
            raise SerializeError(f'Unable to stringify value of "{key}":\n{err}', key=key) from err

    def load(self, text: str, key: Optional[str] = None) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as err:
            raise ParseError(f'Unable to parse value of "{key}":\n{err}', key=key) from err
