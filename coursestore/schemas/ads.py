from pydantic import BaseModel


class AdWatchResponse(BaseModel):
    completed: bool
    provider: str
    count: int
    required: int
    owned: bool
    unlocked_now: bool = False
    message: str


class AdProgressResponse(BaseModel):
    count: int
    required: int
    owned: bool
    message: str
