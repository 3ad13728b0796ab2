from pydantic import BaseModel
from typing import Any, Optional

from api.schemas.fields import LooseText


class ContactMessageRequest(BaseModel):
    vorname: LooseText = None
    nachname: LooseText = None
    email: LooseText = None
    telefon: LooseText = None
    nachricht: LooseText = None
    submitted_at: Any = None  # ISO-8601 string or epoch milliseconds


class ValuationRequestPayload(BaseModel):
    marke: LooseText = None
    modell: LooseText = None
    jahr: Optional[int] = None
    km: Optional[int] = None
    kraftstoff: LooseText = None
    zustand: LooseText = None
    kontakt: LooseText = None
    anmerkung: LooseText = None
    submitted_at: Any = None  # ISO-8601 string or epoch milliseconds
