from enum import Enum
from pydantic import BaseModel


class ToastVariant(str, Enum):
    default = "default"
    success = "success"
    destructive = "destructive"


class Toast(BaseModel):
    title: str
    description: str = ""
    variant: ToastVariant = ToastVariant.default


class ActionResponse(BaseModel):
    """
    Outcome of a user action (status change, wishlist toggle, add to cart).
    """
    success: bool
    notifications: list[Toast] = []
