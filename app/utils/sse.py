from __future__ import annotations

import json
from typing import Any

DONE_LINE = "data: [DONE]\n\n"


def sse_data(payload: dict[str, Any]) -> str:
    data = json.dumps(payload, ensure_ascii=False)
    return f"data: {data}\n\n"


def sse_delta(content: str) -> str:
    return sse_data({"choices": [{"delta": {"content": content}}]})
