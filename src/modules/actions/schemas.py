from pydantic import BaseModel, Field


class ActionRequest(BaseModel):
    id: str = Field(..., min_length=1)


class ActionResponse(BaseModel):
    success: bool = True
