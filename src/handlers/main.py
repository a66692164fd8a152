"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

One Lambda keeps every user's ticket controller in the same warm process,
which is what holds the in-memory ticket state between requests.
"""

from typing import Callable, Dict, Tuple
import json

from . import health_check, tickets


def _response(status: int, body: Dict) -> Dict:
    """Format a JSON API Gateway HTTP API response."""
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def lambda_handler(event, context):
    """
    Entry point invoked by API Gateway HTTP API.

    The event contains the HTTP method and path; we route it to the correct
    handler while keeping shared setup (logging, error handling) centralized.
    """
    method = event.get("requestContext", {}).get("http", {}).get("method", "")
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    route_key = f"{method.upper()} {path.rstrip('/')}"

    # Prefix match, so more specific routes come first.
    route_table: Tuple[Tuple[str, Callable], ...] = (
        ("GET /health", health_check.lambda_handler),
        ("POST /tickets/regenerate", tickets.regenerate_handler),
        ("POST /tickets", tickets.issue_handler),
        ("DELETE /tickets", tickets.invalidate_handler),
        ("GET /tickets/current/code", tickets.code_handler),
        ("GET /tickets/current", tickets.status_handler),
    )

    for prefix, handler in route_table:
        if route_key == prefix or route_key.startswith(prefix + "/"):
            return handler(event, context)

    return _response(404, {"message": "Route not found", "route": route_key})
