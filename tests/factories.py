"""Payload factories shaped like the customer and task-distribution forms."""


def make_event_request_payload(**overrides) -> dict:
    payload = {
        "record_number": "REC-001",
        "client_name": "John Smith",
        "client_email": "john@example.com",
        "client_phone": "+1 555 0100",
        "event_type": "Wedding",
        "start_date": "2024-06-15",
        "end_date": "2024-06-16",
        "expected_number": 150,
        "budget": 50000,
        "preferences": {
            "decoration": True,
            "food": True,
            "drinks": True,
            "photo": False,
            "parties": False,
        },
    }
    payload.update(overrides)
    return payload


def make_task_distribution_payload(event_request_id: str = "EVT-000001", **overrides) -> dict:
    payload = {
        "event_request_id": event_request_id,
        "title": "Wedding production plan",
        "description": "Split the wedding work across sub-teams",
        "total_budget": 3500,
        "event_date": "2024-06-15",
        "tasks": [
            {
                "id": "TASK-001",
                "sub_team": "Decorations",
                "assigned_to": ["John Doe", "Jane Smith"],
                "requirements": "Floral arrangements and lighting",
                "allocated_budget": 1000,
                "deadline": "2024-06-10",
            },
            {
                "id": "TASK-002",
                "sub_team": "Catering",
                "assigned_to": ["Chef Mike", "Server Sarah"],
                "requirements": "Three-course dinner for 150 guests",
                "allocated_budget": 2500,
                "deadline": "2024-06-12",
            },
        ],
    }
    payload.update(overrides)
    return payload


FM_APPROVE = {
    "reviewed_by": "Alice (FM)",
    "comments": "Budget is reasonable",
    "recommendation": "APPROVE",
    "budget_comments": "Within the seasonal range",
}

FM_REJECT = {
    "reviewed_by": "Alice (FM)",
    "comments": "Budget too low for guest count",
    "recommendation": "REJECT",
}

AM_APPROVE = {
    "reviewed_by": "Bob (AM)",
    "comments": "Venue available",
    "recommendation": "APPROVE",
}

AM_REJECT = {
    "reviewed_by": "Bob (AM)",
    "comments": "Venue double-booked",
    "recommendation": "REJECT",
}


def transition_records(records: list[dict]) -> list[dict]:
    """Only the ``workflow_transition`` entries from captured logs."""
    return [r for r in records if r["message"] == "workflow_transition"]
