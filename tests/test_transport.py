from __future__ import annotations

import json
from typing import Any

import pytest
from starlette.testclient import TestClient

from snowflake_mcp.execute import RunQueryTool
from snowflake_mcp.protocol import ResponseEnvelope, ToolResult, encode_event
from snowflake_mcp.server import build_app


def _frames(text: str) -> list[dict[str, Any]]:
    """Parse an event-stream body into the JSON payloads of its frames."""
    frames: list[dict[str, Any]] = []
    for block in text.split("\n\n"):
        if not block:
            continue
        lines = block.split("\n")
        assert lines[0] == "event: message"
        assert lines[1].startswith("data: ")
        frames.append(json.loads(lines[1].removeprefix("data: ")))
    return frames


@pytest.fixture
def client(sqlite_tool: RunQueryTool) -> TestClient:
    return TestClient(build_app(sqlite_tool, path="/mcp"))


def _call(sql: str, request_id: Any = 1) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "callTool",
        "params": {"name": "run_query", "arguments": {"sql": sql}},
    }


def test_encode_event_frame() -> None:
    envelope = ResponseEnvelope.success(7, ToolResult.from_text("[]"))
    assert encode_event(envelope) == (
        'event: message\ndata: {"jsonrpc":"2.0","id":7,'
        '"result":{"content":[{"type":"text","text":"[]"}]}}\n\n'
    )


def test_select_one_scenario(client: TestClient) -> None:
    response = client.post("/mcp", json=_call("SELECT 1", request_id=7))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache"
    assert _frames(response.text) == [
        {
            "jsonrpc": "2.0",
            "id": 7,
            "result": {"content": [{"type": "text", "text": '[{"1":1}]'}]},
        }
    ]


def test_query_returns_table_rows(client: TestClient) -> None:
    sql = "SELECT id, name FROM t WHERE updated_at > '2024-01-01' ORDER BY id"
    response = client.post("/mcp", json=_call(sql))

    (frame,) = _frames(response.text)
    rows = json.loads(frame["result"]["content"][0]["text"])
    assert rows == [{"id": 2, "name": "Bob"}, {"id": 3, "name": "Charlie"}]


def test_delete_scenario(client: TestClient) -> None:
    response = client.post("/mcp", json=_call("DELETE FROM t", request_id=11))

    assert response.status_code == 200
    assert _frames(response.text) == [
        {
            "jsonrpc": "2.0",
            "id": 11,
            "error": {"code": -32000, "message": "Only SELECT queries are allowed"},
        }
    ]
    # The table is untouched.
    check = client.post("/mcp", json=_call("SELECT COUNT(*) AS n FROM t"))
    (frame,) = _frames(check.text)
    assert json.loads(frame["result"]["content"][0]["text"]) == [{"n": 3}]


def test_unknown_method_scenario(client: TestClient) -> None:
    body = {"jsonrpc": "2.0", "id": 4, "method": "unknownMethod"}
    response = client.post("/mcp", json=body)

    assert response.status_code == 200
    (frame,) = _frames(response.text)
    assert frame["id"] == 4
    assert frame["error"] == {"code": -32601, "message": "Method not found"}


def test_backend_error_is_enveloped(client: TestClient) -> None:
    response = client.post("/mcp", json=_call("SELECT * FROM missing_table", request_id="q"))

    (frame,) = _frames(response.text)
    assert frame["id"] == "q"
    assert frame["error"] == {"code": -32000, "message": "no such table: missing_table"}


def test_malformed_json_is_400(client: TestClient) -> None:
    response = client.post(
        "/mcp", content=b"{not json", headers={"content-type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {
        "jsonrpc": "2.0",
        "id": None,
        "error": {"code": -32700, "message": "Parse error"},
    }


@pytest.mark.parametrize(
    ("body", "expected_id"),
    [
        ([1, 2, 3], None),
        ({"id": 12}, 12),
        ({"id": 13, "method": 5}, 13),
        ({"id": 14, "method": "callTool", "params": "run_query"}, 14),
    ],
)
def test_invalid_request_is_400(client: TestClient, body: Any, expected_id: Any) -> None:
    response = client.post("/mcp", json=body)

    assert response.status_code == 400
    payload = response.json()
    assert payload["id"] == expected_id
    assert payload["error"]["code"] == -32600


def test_status_and_health(client: TestClient) -> None:
    assert client.get("/mcp").json() == {"status": "MCP running"}
    assert client.get("/health").json() == {"status": "healthy", "service": "snowflake-mcp"}


def test_custom_invocation_path(sqlite_tool: RunQueryTool) -> None:
    client = TestClient(build_app(sqlite_tool, path="/rpc"))
    response = client.post("/rpc", json=_call("SELECT 1"))
    assert response.status_code == 200
    assert client.post("/mcp", json=_call("SELECT 1")).status_code == 404


def test_colon_literal_scenario(client: TestClient) -> None:
    response = client.post("/mcp", json=_call("SELECT 'at :noon' AS v", request_id=21))

    (frame,) = _frames(response.text)
    assert frame["id"] == 21
    assert json.loads(frame["result"]["content"][0]["text"]) == [{"v": "at :noon"}]


def test_infinite_float_payload_is_strict_json(client: TestClient) -> None:
    response = client.post("/mcp", json=_call("SELECT 9e999 AS hi, -9e999 AS lo"))

    (frame,) = _frames(response.text)
    text = frame["result"]["content"][0]["text"]
    assert text == '[{"hi":"Infinity","lo":"-Infinity"}]'
