from pydantic import BaseModel
from typing import Optional

# Request DTO. Both fields are checked by the service layer so that a
# malformed url or code is reported as 400 rather than a schema error.
class LinkCreateRequest(BaseModel):
    url: Optional[str] = None
    code: Optional[str] = None
