"""Shared builders and fakes for the test suite."""

import json

from fastapi.websockets import WebSocketState


def make_source(scoring=None, non_scoring=None, persona="tester"):
    """Build catalog source data for a single persona."""
    return {
        persona: {
            "scoring": scoring or [],
            "non_scoring": non_scoring or [],
        }
    }


def scoring_question(qid, points, qtype="single"):
    """Scoring question source entry; option i is named f"{qid}_{i}"."""
    return {
        "id": qid,
        "question": f"Question {qid}?",
        "type": qtype,
        "options": {f"{qid}_{i}": p for i, p in enumerate(points)},
    }


def context_question(qid, options=("a", "b")):
    return {
        "id": qid,
        "question": f"Context {qid}?",
        "type": "single",
        "options": list(options),
    }


class FakeWebSocket:
    """In-memory stand-in for a FastAPI WebSocket."""

    def __init__(self, frames=()):
        self.incoming = list(frames)
        self.sent: list[dict] = []
        self.closed_with: tuple[int, str | None] | None = None
        self.client_state = WebSocketState.CONNECTING
        self.application_state = WebSocketState.CONNECTING

    async def accept(self):
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED

    async def receive(self):
        if self.incoming:
            return self.incoming.pop(0)
        self.client_state = WebSocketState.DISCONNECTED
        return {"type": "websocket.disconnect", "code": 1001}

    async def send_json(self, data):
        self.sent.append(data)

    async def close(self, code=1000, reason=None):
        self.closed_with = (code, reason)
        self.application_state = WebSocketState.DISCONNECTED

    @property
    def sent_types(self) -> list[str]:
        return [m["type"] for m in self.sent]


def frame(payload) -> dict:
    """ASGI receive message carrying a JSON text frame."""
    return {"type": "websocket.receive", "text": json.dumps(payload)}


def raw_frame(text: str) -> dict:
    return {"type": "websocket.receive", "text": text}
