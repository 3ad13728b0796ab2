# api/routers/cars.py
import logging
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, HTTPException, Depends, Request, status
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.database import get_db
from db.models import Car, PUBLIC_STATUSES, normalize_status
from api.schemas.cars import CarWriteRequest, CarResponse, OkResponse
from api.utils.auth import require_admin
from api.utils.body import read_json_body

logger = logging.getLogger(__name__)
router = APIRouter()


def build_car_fields(payload: Optional[CarWriteRequest]) -> Dict[str, Any]:
    """Trim make/model, normalize status and reject rows without make or model"""
    payload = payload or CarWriteRequest()
    fields = {
        "make": (payload.make or "").strip(),
        "model": (payload.model or "").strip(),
        "year": payload.year,
        "km": payload.km,
        "fuel": payload.fuel,
        "gearbox": payload.gearbox,
        "price": payload.price,
        "status": normalize_status(payload.status),
        "image_url": payload.image_url,
        "description": payload.description,
        "willhaben_url": payload.willhaben_url,
    }
    if not fields["make"] or not fields["model"]:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing make/model")
    return fields


def store_error(db: Session, action: str, exc: Exception) -> HTTPException:
    db.rollback()
    logger.error(f"Error {action}: {exc}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="DB error")


@router.get("/cars", response_model=List[CarResponse])
async def list_cars(db: Session = Depends(get_db)):
    """Public inventory, newest first"""
    try:
        cars = (
            db.query(Car)
            .filter(func.lower(Car.status).in_(PUBLIC_STATUSES))
            .order_by(Car.created_at.desc(), Car.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        raise store_error(db, "listing cars", e)

    return [CarResponse.model_validate(car) for car in cars]


@router.post("/cars", response_model=CarResponse)
async def create_car(
    request: Request,
    claims: dict = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Add a vehicle to the inventory

    Requires: Authorization: Bearer <admin token>
    """
    payload = await read_json_body(request, CarWriteRequest)
    fields = build_car_fields(payload)

    try:
        car = Car(**fields)
        db.add(car)
        db.commit()
        db.refresh(car)
    except SQLAlchemyError as e:
        raise store_error(db, "creating car", e)

    logger.info(f"Car created: {car.id} {car.make} {car.model}")
    return CarResponse.model_validate(car)


@router.api_route("/cars/", methods=["PUT", "DELETE"], include_in_schema=False)
async def missing_car_id():
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing id")


@router.put("/cars/{car_id}", response_model=CarResponse)
async def update_car(
    car_id: int,
    request: Request,
    claims: dict = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Replace the editable fields of a vehicle

    Requires: Authorization: Bearer <admin token>
    """
    payload = await read_json_body(request, CarWriteRequest)
    fields = build_car_fields(payload)

    try:
        car = db.query(Car).filter(Car.id == car_id).first()
        if car is None:
            logger.warning(f"Update requested for unknown car {car_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="DB error")

        for key, value in fields.items():
            setattr(car, key, value)
        db.commit()
        db.refresh(car)
    except SQLAlchemyError as e:
        raise store_error(db, f"updating car {car_id}", e)

    logger.info(f"Car updated: {car.id}")
    return CarResponse.model_validate(car)


@router.delete("/cars/{car_id}", response_model=OkResponse)
async def delete_car(
    car_id: int,
    claims: dict = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Remove a vehicle; deleting an unknown id is acknowledged as well

    Requires: Authorization: Bearer <admin token>
    """
    try:
        deleted = db.query(Car).filter(Car.id == car_id).delete()
        db.commit()
    except SQLAlchemyError as e:
        raise store_error(db, f"deleting car {car_id}", e)

    logger.info(f"Car delete {car_id}: {deleted} row(s) removed")
    return OkResponse(ok=True)
