from pydantic import BaseModel, Field

class LinkCreatedResponse(BaseModel):
    code: str
    url: str
    short_url: str = Field(..., alias="shortUrl")

    class Config:
        populate_by_name = True
