"""Conversion router.

GET /convert?amount=..&currency=.. renders XML when the client sends
``Accept: application/xml`` and JSON otherwise. Validation errors map to 400,
upstream failures to 503 without exposing the underlying cause.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import JSONResponse, Response
from starlette import status

from xrate.services.rates.conversion import ConversionService
from xrate.services.rates.errors import UpstreamError, ValidationError


router = APIRouter(tags=["convert"])
logger = logging.getLogger("xrate.convert")


def get_conversion_service(request: Request) -> ConversionService:
    return request.app.state.conversion_service


@router.get("/convert", summary="Convert an amount into every known currency")
def convert(
    amount: str = Query("", description="Decimal amount, e.g. 200 or 12.50"),
    currency: str = Query("", description="Base currency code, e.g. SEK"),
    accept: str = Header("", alias="Accept"),
    svc: ConversionService = Depends(get_conversion_service),
):
    try:
        result = svc.convert(amount.strip(), currency.strip())
    except ValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "bad_request", "detail": str(e)},
        )
    except UpstreamError as e:
        logger.error("Error fetching exchange rates: %s (cause: %s)", e, e.__cause__)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "error": "upstream_unavailable",
                "detail": "Exchange rates are temporarily unavailable.",
            },
        )
    if accept.strip() == "application/xml":
        return Response(content=result.to_xml(), media_type="application/xml")
    return Response(content=result.to_json(), media_type="application/json")
