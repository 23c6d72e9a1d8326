from starlette.types import ASGIApp, Receive, Scope, Send, Message

from app.core.settings import settings

_DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")


class SecurityHeadersMiddleware:
    """Apply safe default security headers; API responses are also marked uncacheable."""

    def __init__(self, app: ASGIApp, enable_hsts: bool = True) -> None:
        self.app = app
        self.enable_hsts = enable_hsts

    def _defaults(self, path: str) -> list[tuple[bytes, bytes]]:
        defaults: list[tuple[bytes, bytes]] = [
            (b"x-content-type-options", b"nosniff"),
            (b"x-frame-options", b"DENY"),
            (b"referrer-policy", b"no-referrer"),
            (b"x-xss-protection", b"0"),
            (b"cross-origin-opener-policy", b"same-origin"),
            (b"cross-origin-resource-policy", b"same-origin"),
        ]
        if path.startswith("/api/"):
            defaults.append((b"cache-control", b"no-store"))
        if self.enable_hsts:
            defaults.append((
                b"strict-transport-security",
                b"max-age=63072000; includeSubDomains; preload",
            ))
        # Swagger UI loads inline scripts, so the configured policy skips the docs pages.
        if settings.content_security_policy and not path.startswith(_DOCS_PATHS):
            header_name = (
                b"content-security-policy-report-only"
                if settings.content_security_policy_report_only
                else b"content-security-policy"
            )
            defaults.append((header_name, settings.content_security_policy.encode()))
        return defaults

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        defaults = self._defaults(scope.get("path", ""))

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                new_headers = list(message.get("headers", []))
                existing_keys = {key.lower() for key, _ in new_headers}
                for key, value in defaults:
                    if key not in existing_keys:
                        new_headers.append((key, value))
                message["headers"] = new_headers
            await send(message)

        await self.app(scope, receive, send_with_headers)
