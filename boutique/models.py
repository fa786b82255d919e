# boutique/models.py
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Request bodies are parsed leniently: every field may be missing or null so
# the handlers can report the storefront's own validation messages.


class LoginIn(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class TokenOut(BaseModel):
    token: str


class Product(BaseModel):
    id: str
    name: str
    description: str
    price: Optional[Union[int, float]] = None
    category: Optional[str] = None


class ProductIn(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Any = None
    category: Optional[str] = None


class ProductUpdate(BaseModel):
    """
    Partial update. `model_fields_set` tells an omitted field apart from one
    sent as null, which matters for `price`: null clears it, omitted keeps it.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    price: Any = None
    category: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        return {k: getattr(self, k) for k in self.model_fields_set}


class DeleteOut(BaseModel):
    success: bool = True
    removed: Product


class OrderIn(BaseModel):
    # the storefront form posts camelCase `cardType`
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    card_type: Optional[str] = Field(default=None, alias="cardType")
    quantity: Any = None
    message: Optional[str] = None


class SuccessOut(BaseModel):
    success: bool = True
