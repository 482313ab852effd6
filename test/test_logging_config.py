import json
import logging

from fastapi.testclient import TestClient

from conftest import FixedClock

from pms.api.app import create_app
from pms.application.container import build_container
from pms.config import Settings
from pms.logging_config import JsonFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("pms.api.errors", logging.INFO, __file__, 1, "request_rejected reason=%s", ("blank",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_request_fields_when_present():
    line = JsonFormatter().format(_record(method="GET", path="/api/medicines/search", status_code=400))
    payload = json.loads(line)

    assert payload["message"] == "request_rejected reason=blank"
    assert payload["logger"] == "pms.api.errors"
    assert (payload["method"], payload["path"], payload["status_code"]) == ("GET", "/api/medicines/search", 400)


def test_json_formatter_omits_request_fields_for_plain_records():
    payload = json.loads(JsonFormatter().format(_record()))
    assert not {"method", "path", "status_code"} & set(payload)


def test_rejected_request_is_logged_with_method_and_path(caplog):
    container = build_container(Settings(), clock=FixedClock())
    client = TestClient(create_app(container))

    with caplog.at_level(logging.INFO, logger="pms.api.errors"):
        client.get("/api/medicines/search", params={"q": ""})

    record = next(r for r in caplog.records if r.getMessage().startswith("request_rejected"))
    assert (record.method, record.path, record.status_code) == ("GET", "/api/medicines/search", 400)
