"""
Sample global packages written on first start.

Global packages demonstrate the tracking UI out of the box; the API refuses
to delete them but still lets clients update them.
"""

from typing import Any, Dict, List

SAMPLE_TRACKING_NUMBERS = ("1234567890", "9876543210", "5555666677", "7777888899")

SEED_CREATED_AT = "2024-01-01T00:00:00.000Z"


def _event(description: str, timestamp: str, location: str, completed: bool) -> Dict[str, Any]:
    return {
        "description": description,
        "timestamp": timestamp,
        "location": location,
        "completed": completed,
    }


def sample_packages(placeholder_image: str) -> List[Dict[str, Any]]:
    return [
        {
            "trackingNumber": "1234567890",
            "status": "in_transit",
            "recipient": "Alex Morgan",
            "destination": "Chicago, IL",
            "packageImage": placeholder_image,
            "events": [
                _event("Package created", "2024-01-01T09:00:00.000Z", "Origin facility", True),
                _event("Departed sorting center", "2024-01-02T14:30:00.000Z", "Memphis, TN", True),
                _event("Out for delivery", "2024-01-04T08:00:00.000Z", "Chicago, IL", False),
            ],
            "isGlobal": True,
            "createdAt": SEED_CREATED_AT,
        },
        {
            "trackingNumber": "9876543210",
            "status": "delivered",
            "recipient": "Sam Lee",
            "destination": "Austin, TX",
            "packageImage": placeholder_image,
            "events": [
                _event("Package created", "2024-01-01T10:15:00.000Z", "Origin facility", True),
                _event("Arrived at local facility", "2024-01-03T06:45:00.000Z", "Austin, TX", True),
                _event("Delivered", "2024-01-03T16:20:00.000Z", "Austin, TX", True),
            ],
            "isGlobal": True,
            "createdAt": SEED_CREATED_AT,
        },
        {
            "trackingNumber": "5555666677",
            "status": "pending",
            "recipient": "Jordan Rivera",
            "destination": "Seattle, WA",
            "packageImage": placeholder_image,
            "events": [
                _event("Package created", "2024-01-01T11:00:00.000Z", "Origin facility", True),
            ],
            "isGlobal": True,
            "createdAt": SEED_CREATED_AT,
        },
        {
            "trackingNumber": "7777888899",
            "status": "exception",
            "recipient": "Casey Kim",
            "destination": "Denver, CO",
            "packageImage": placeholder_image,
            "events": [
                _event("Package created", "2024-01-01T12:30:00.000Z", "Origin facility", True),
                _event("Delivery attempted", "2024-01-05T13:10:00.000Z", "Denver, CO", True),
                _event("Held at facility", "2024-01-05T18:00:00.000Z", "Denver, CO", False),
            ],
            "isGlobal": True,
            "createdAt": SEED_CREATED_AT,
        },
    ]
