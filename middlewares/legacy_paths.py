from starlette.types import ASGIApp, Receive, Scope, Send

# ✅ 구 버전 경로 → 현재 경로 (리다이렉트 대신 요청 경로를 바로 바꿔 처리)
LEGACY_PREFIXES = {
    "/grades/student/": "/grades/learner/",
}


class LegacyPathMiddleware:
    def __init__(self, app: ASGIApp, aliases: dict = None):
        self.app = app
        self.aliases = LEGACY_PREFIXES if aliases is None else aliases

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] == "http":
            path = scope["path"]
            for old, new in self.aliases.items():
                if path.startswith(old):
                    path = new + path[len(old):]
                    scope = dict(scope, path=path, raw_path=path.encode())
                    break
        await self.app(scope, receive, send)
