"""Tests for the snapshot codec used by the SQL store."""

import json
from datetime import datetime, timezone

from eventflow_engines.validation import parse_event_request_data
from eventflow_kernel.db.serialization import (
    EVENT_REQUEST_CODEC,
    TASK_DISTRIBUTION_CODEC,
    to_payload,
)
from eventflow_kernel.domain.event_request import EventRequest
from eventflow_kernel.domain.roles import Role
from tests.factories import make_event_request_payload

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestToPayload:

    def test_payload_is_json_serializable(self):
        data = parse_event_request_data(make_event_request_payload(budget="1234.56"))
        request = EventRequest.from_data(data, created_by=Role.CS, created_at=NOW)
        payload = to_payload(request)

        json.dumps(payload)
        assert payload["budget"] == "1234.56"
        assert payload["start_date"] == "2024-06-15"
        assert payload["created_by"] == "CS"
        assert payload["status"] == "DRAFT"
        assert payload["created_at"] == NOW.isoformat()
        assert payload["financial_review"] is None

    def test_codec_kinds(self):
        assert EVENT_REQUEST_CODEC.kind == "event_request"
        assert TASK_DISTRIBUTION_CODEC.kind == "task_distribution"

    def test_decode_restores_the_record(self):
        data = parse_event_request_data(make_event_request_payload())
        request = EventRequest.from_data(data, created_by=Role.CS, created_at=NOW)
        assert EVENT_REQUEST_CODEC.decode(EVENT_REQUEST_CODEC.encode(request)) == request
