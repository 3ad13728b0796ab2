# api/utils/body.py
from typing import Type, TypeVar
from fastapi import HTTPException, Request, status
from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


async def read_json_body(request: Request, model: Type[ModelT]) -> ModelT:
    """
    Parse the request body after the route's dependencies have run

    An empty body counts as {}; anything that does not decode or fit the
    model is a 400.
    """
    raw = await request.body()
    if not raw.strip():
        return model()
    try:
        return model.model_validate_json(raw)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bad request")
