from pydantic import BaseModel, Field, field_validator


class JarvisRequest(BaseModel):
    message: str = Field(min_length=1)

    @field_validator("message")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("No message provided")
        return value


class JarvisResponse(BaseModel):
    reply: str
    category: str | None = None
    trace_id: str | None = None


class ChatHistoryEntry(BaseModel):
    role: str = Field(min_length=1, max_length=32)
    content: str = Field(default="", max_length=8000)


class DoctorRequest(JarvisRequest):
    chat_history: list[ChatHistoryEntry] | None = Field(default=None, alias="chatHistory")


class DoctorResponse(BaseModel):
    reply: str
    source: str
    error: str | None = None
    trace_id: str | None = None


class ErrorReply(BaseModel):
    reply: str
    error: str | None = None
