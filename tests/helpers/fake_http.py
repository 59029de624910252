"""In-memory stand-in for ``requests.Session``.

``FakeSession.request()`` answers from a queue of ``FakeResponse`` objects
(or raises queued exceptions) and records every call for assertions.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, *, text: Optional[str] = None):
        self.status_code = status_code
        if text is not None:
            self._text = text
        elif body is None:
            self._text = ""
        else:
            self._text = json.dumps(body)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def content(self) -> bytes:
        return self._text.encode("utf-8")

    def json(self) -> Any:
        return json.loads(self._text)


class FakeSession:
    def __init__(self, *responses):
        self.responses: List[Any] = list(responses)
        self.calls: List[dict] = []

    def queue(self, *responses) -> None:
        self.responses.extend(responses)

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.responses:
            raise AssertionError(f"unexpected request {method} {url}")
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt
