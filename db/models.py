from sqlalchemy import Column, Integer, String, DateTime, Text, Float
from sqlalchemy.sql import func
from db.database import Base

# Statuses visible on the public site
STATUS_FOR_SALE = "verkauf"
STATUS_RESERVED = "reserviert"
PUBLIC_STATUSES = (STATUS_FOR_SALE, STATUS_RESERVED)


def normalize_status(value) -> str:
    """Anything other than 'reserviert' (any case) is listed as for sale"""
    if value is None:
        return STATUS_FOR_SALE
    return STATUS_RESERVED if str(value).lower() == STATUS_RESERVED else STATUS_FOR_SALE


class Car(Base):
    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, index=True)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer)
    km = Column(Integer)
    fuel = Column(String(50))
    gearbox = Column(String(50))
    price = Column(Float)
    status = Column(String(20), nullable=False, default=STATUS_FOR_SALE, index=True)
    image_url = Column(Text)
    description = Column(Text)
    willhaben_url = Column(Text)  # external listing link
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, index=True)
    vorname = Column(String(255))
    nachname = Column(String(255))
    email = Column(String(255))
    telefon = Column(String(100))
    nachricht = Column(Text)
    submitted_at = Column(DateTime(timezone=True), nullable=False)


class ValuationRequest(Base):
    __tablename__ = "valuation_requests"

    id = Column(Integer, primary_key=True, index=True)
    marke = Column(String(100))
    modell = Column(String(100))
    jahr = Column(Integer)
    km = Column(Integer)
    kraftstoff = Column(String(50))
    zustand = Column(String(100))
    kontakt = Column(String(255))
    anmerkung = Column(Text)
    submitted_at = Column(DateTime(timezone=True), nullable=False)
