from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from api.schemas.fields import LooseText


class CarWriteRequest(BaseModel):
    """Editable vehicle fields; presence of make/model is checked by the handler"""
    make: LooseText = None
    model: LooseText = None
    year: Optional[int] = None
    km: Optional[int] = None
    fuel: LooseText = None
    gearbox: LooseText = None
    price: Optional[float] = None
    status: LooseText = None
    image_url: LooseText = None
    description: LooseText = None
    willhaben_url: LooseText = None


class CarResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    make: str
    model: str
    year: Optional[int] = None
    km: Optional[int] = None
    fuel: Optional[str] = None
    gearbox: Optional[str] = None
    price: Optional[float] = None
    status: str
    image_url: Optional[str] = None
    description: Optional[str] = None
    willhaben_url: Optional[str] = None
    created_at: Optional[datetime] = None


class OkResponse(BaseModel):
    ok: bool = True
