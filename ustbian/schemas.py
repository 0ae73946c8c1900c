from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """Shape returned by mutating endpoints that have no resource to echo back."""

    success: bool = True
    message: str
