from pydantic import BaseModel


class ShareLinkRead(BaseModel):
    url: str
    token: str
