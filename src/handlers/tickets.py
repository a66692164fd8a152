"""
Ticket handlers for the /tickets routes.

Each handler resolves the caller from the JWT authorizer claims, looks up the
caller's lifecycle controller and returns a JSON snapshot. Tickets live in the
warm Lambda's memory only.
"""

from __future__ import annotations

import json
import uuid
from typing import Callable, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from models.response import ApiResponse
from models.ticket import CodeView, IssueRequest, TicketView
from services.code_renderer import render_svg
from services.ticket_controller import TicketLifecycleController
from services.ticket_registry import TicketRegistry
from utils.error_handling import AppError, NotFoundError, UnauthorizedError, to_response
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Lazy-loaded so settings and the wallet client are read on first use
_registry: Optional[TicketRegistry] = None


def _get_registry() -> TicketRegistry:
    """Lazy-load TicketRegistry."""
    global _registry
    if _registry is None:
        _registry = TicketRegistry()
    return _registry


def _json(status: int, body: str) -> Dict:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": body,
    }


def _user_id(event: Dict) -> str:
    """Caller identity as supplied by the external auth service."""
    claims = (
        event.get("requestContext", {})
        .get("authorizer", {})
        .get("jwt", {})
        .get("claims", {})
    )
    user_id = claims.get("sub")
    if not user_id:
        raise UnauthorizedError()
    return user_id


def _view(controller: TicketLifecycleController, status: int = 200) -> Dict:
    view: TicketView = controller.snapshot()
    return _json(status, view.model_dump_json())


def _handle(action: str, event: Dict, work: Callable[[TicketLifecycleController], Dict]) -> Dict:
    """Shared identity lookup and error mapping for every ticket route."""
    correlation_id = str(uuid.uuid4())
    try:
        user_id = _user_id(event)
        controller = _get_registry().controller_for(user_id)
        response = work(controller)
        logger.info(
            "Ticket request served",
            extra={"action": action, "user_id": user_id, "correlation_id": correlation_id},
        )
        return response
    except AppError as exc:
        logger.warning(
            "Ticket request rejected",
            extra={"action": action, "error": str(exc), "correlation_id": correlation_id},
        )
        return to_response(exc, correlation_id)
    except PydanticValidationError as exc:
        logger.warning(
            "Ticket request invalid",
            extra={"action": action, "error_count": exc.error_count(), "correlation_id": correlation_id},
        )
        body = ApiResponse(
            message="Invalid request",
            data=json.loads(exc.json(include_url=False)),
            correlation_id=correlation_id,
        )
        return _json(400, body.model_dump_json())
    except json.JSONDecodeError as exc:
        body = ApiResponse(message="Malformed JSON body", data=str(exc), correlation_id=correlation_id)
        return _json(400, body.model_dump_json())
    except Exception:
        logger.exception("Ticket request failed", extra={"action": action, "correlation_id": correlation_id})
        body = ApiResponse(message="Internal error", correlation_id=correlation_id)
        return _json(500, body.model_dump_json())


def issue_handler(event, context):
    """Handle POST /tickets."""

    def work(controller: TicketLifecycleController) -> Dict:
        request = IssueRequest.model_validate(json.loads(event.get("body") or "{}"))
        controller.issue(request)
        return _view(controller, status=201)

    return _handle("issue", event, work)


def regenerate_handler(event, context):
    """Handle POST /tickets/regenerate."""

    def work(controller: TicketLifecycleController) -> Dict:
        controller.regenerate()
        return _view(controller, status=201)

    return _handle("regenerate", event, work)


def invalidate_handler(event, context):
    """Handle DELETE /tickets."""

    def work(controller: TicketLifecycleController) -> Dict:
        controller.invalidate()
        return _view(controller)

    return _handle("invalidate", event, work)


def status_handler(event, context):
    """Handle GET /tickets/current. Polling the status advances the clock."""

    def work(controller: TicketLifecycleController) -> Dict:
        if controller.ticket is not None:
            controller.tick()
        return _view(controller)

    return _handle("status", event, work)


def code_handler(event, context):
    """Handle GET /tickets/current/code."""

    def work(controller: TicketLifecycleController) -> Dict:
        if controller.ticket is None:
            raise NotFoundError("No ticket has been issued")
        controller.tick()
        matrix = controller.render()
        view = CodeView(
            ticket_id=controller.ticket.ticket_id,
            ticket_code=controller.ticket_code(),
            valid=controller.is_valid,
            size=matrix.size,
            matrix=matrix.to_lists(),
            svg=render_svg(matrix),
        )
        return _json(200, view.model_dump_json())

    return _handle("code", event, work)
