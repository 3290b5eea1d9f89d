"""Auth middleware - resolves the acting identity from a bearer token."""

import falcon.asgi

from rolegate.domain.value_objects import Actor


class AuthMiddleware:
    """Middleware that validates bearer tokens and sets req.context.user.

    No Authorization header yields the anonymous actor; an invalid token
    yields None so that resources answer 401.
    """

    def __init__(self, keycloak_provider=None) -> None:
        self._keycloak = keycloak_provider

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Extract user from Authorization header."""
        auth = req.get_header("Authorization")
        if auth and auth.startswith("Bearer "):
            token = auth[7:]
            if self._keycloak:
                user = await self._keycloak.decode_token(token)
                if user:
                    req.context.user = Actor(
                        user_id=user.user_id,
                        realm_roles=frozenset(user.realm_roles),
                    )
                    return
            req.context.user = None
        else:
            req.context.user = Actor.anonymous()
