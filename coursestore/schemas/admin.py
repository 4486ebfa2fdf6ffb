from pydantic import BaseModel


class StatsResponse(BaseModel):
    users: int
    sales: int
    revenue: int
    pending_requests: int


class ManualGrantRequest(BaseModel):
    course_id: str
