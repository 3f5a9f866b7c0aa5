"""Request middleware binding the acting user for versioned writes."""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from asof.infrastructure.identity import reset_current_actor, set_current_actor

logger = logging.getLogger(__name__)


class ActorContextMiddleware(BaseHTTPMiddleware):
    """Reads the actor id from a request header into the identity context.

    Requests without the header run anonymously: versions they write carry
    no ``user_id``.
    """

    def __init__(self, app, header_name: str = "X-Actor-Id"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        actor_id = request.headers.get(self.header_name) or None
        token = set_current_actor(actor_id)
        try:
            if actor_id:
                logger.debug("%s %s as %s", request.method, request.url.path, actor_id)
            return await call_next(request)
        finally:
            reset_current_actor(token)
