from dataclasses import dataclass
from typing import AsyncGenerator, Literal, Protocol, Sequence


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


class AIConfigurationError(RuntimeError):
    pass


class GenerationBackendError(RuntimeError):
    def __init__(self, message: str, *, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class AIClient(Protocol):
    def stream(
        self, messages: Sequence[ChatMessage]
    ) -> AsyncGenerator[str, None]: ...
