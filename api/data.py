"""GET /api/data — operator read endpoint."""

from fastapi import APIRouter, Query, Request
from fastapi.encoders import jsonable_encoder

from api.base import success_response


VALID_TYPES = {"quotes", "payment_methods", "services"}


def create_data_router(services: dict) -> APIRouter:
    router = APIRouter()

    quote_svc = services["quote"]
    payment_method_svc = services["payment_method"]
    catalog_svc = services["catalog"]

    @router.get("/data")
    async def get_data(
        request: Request,
        type: str | None = Query(None),
        id: str | None = Query(None),
        include: str | None = Query(None),
        filter: str | None = Query(None),
        search: str | None = Query(None),
    ):
        if type is None:
            raise ValueError("'type' query parameter is required")

        if type not in VALID_TYPES:
            raise ValueError(f"Unknown type '{type}'. Valid types: {', '.join(sorted(VALID_TYPES))}")

        includes = set(include.split(",")) if include else set()

        if type == "quotes":
            return _handle_quotes(quote_svc, id, search, includes)

        if type == "payment_methods":
            return _handle_payment_methods(payment_method_svc, filter)

        if type == "services":
            return success_response(
                [s.model_dump(mode="json") for s in catalog_svc.list_all()]
            ).model_dump(mode="json")

    return router


def _quote_with_pricing(quote_svc, quote) -> dict:
    data = quote.model_dump(mode="json")
    data["pricing"] = quote_svc.pricing(quote).model_dump(mode="json")
    return data


def _handle_quotes(quote_svc, id, search, includes):
    if id:
        quote = quote_svc.get(id)
        data = _quote_with_pricing(quote_svc, quote)
        if "history" in includes:
            data["history"] = jsonable_encoder(quote_svc.history(quote.id))
        return success_response(data).model_dump(mode="json")

    if search:
        quotes = quote_svc.search(search)
    else:
        quotes = quote_svc.list_all()

    if "pricing" in includes:
        data = [_quote_with_pricing(quote_svc, q) for q in quotes]
    else:
        data = [q.model_dump(mode="json") for q in quotes]
    return success_response(data).model_dump(mode="json")


def _handle_payment_methods(payment_method_svc, filter):
    if filter == "active":
        methods = payment_method_svc.list_active()
    else:
        methods = payment_method_svc.list_all()

    return success_response(
        [m.model_dump(mode="json") for m in methods]
    ).model_dump(mode="json")
