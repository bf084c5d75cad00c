from pydantic import BaseModel


class QuickAction(BaseModel):
    key: str
    label: str
    href: str
