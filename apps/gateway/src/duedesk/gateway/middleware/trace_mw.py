"""TraceMiddleware -- 为任务操作绑定 trace_id

trace_id 从路径参数中的 task_id 生成，贯穿该请求内的任务日志。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# ULID 字符串长度
_TASK_ID_LENGTH = 26


class TraceMiddleware(BaseHTTPMiddleware):
    """任务级追踪中间件 -- 为任务操作绑定 trace_id"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 从 /api/tasks/{task_id}[/complete] 提取 task_id
        parts = request.url.path.split("/")
        trace_id = None
        for i, part in enumerate(parts):
            if part == "tasks" and i + 1 < len(parts):
                task_id = parts[i + 1]
                if len(task_id) == _TASK_ID_LENGTH:
                    trace_id = f"trace-{task_id}"
                break

        if trace_id:
            structlog.contextvars.bind_contextvars(trace_id=trace_id)

        return await call_next(request)
