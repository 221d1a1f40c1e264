"""POST /api/actions — operator mutation endpoint."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from api.base import success_response
from auth.config import AuthConfig
from auth.security_middleware import current_operator
from auth.share import share_link, share_message
from auth.types import Operator
from core import editing
from core.models import LineItemCreate, PaymentMethodCreate, PaymentOption, Quote, ServiceCreate
from core.parsing import parse_amount, parse_installments, parse_percent, parse_quote_payload


class ActionRequest(BaseModel):
    domain: str
    action: str
    data: dict


def create_actions_router(services: dict, config: AuthConfig) -> APIRouter:
    router = APIRouter()

    handlers = {
        "quote": QuoteHandler(
            services["quote"], services["payment_method"], services["catalog"], config
        ),
        "payment_method": PaymentMethodHandler(services["payment_method"]),
        "service": ServiceHandler(services["catalog"]),
    }

    @router.post("/actions")
    async def perform_action(request: Request, body: ActionRequest):
        operator = current_operator(request, f"{body.domain}.{body.action}")

        handler = handlers.get(body.domain)
        if handler is None:
            raise ValueError(
                f"Unknown domain '{body.domain}'. "
                f"Valid domains: {', '.join(sorted(handlers.keys()))}"
            )

        if body.action not in handler.ALLOWED_ACTIONS:
            raise ValueError(
                f"Action '{body.action}' not allowed on '{body.domain}'. "
                f"Allowed: {', '.join(sorted(handler.ALLOWED_ACTIONS))}"
            )

        method = getattr(handler, f"_handle_{body.action}")
        result = method(body.data, operator)
        return success_response(result).model_dump(mode="json")

    return router


# =============================================================================
# HANDLER CLASSES
# =============================================================================


def _require(data: dict, key: str):
    if key not in data or data[key] in (None, ""):
        raise ValueError(f"'{key}' is required")
    return data[key]


def _quote_from(data: dict) -> Quote:
    return Quote.model_validate(parse_quote_payload(_require(data, "quote")))


class QuoteHandler:
    ALLOWED_ACTIONS = {
        "create", "save", "preview", "expire", "reopen", "share",
        "add_item", "remove_item", "import_service",
        "add_option", "update_option", "remove_option",
    }

    def __init__(self, service, payment_methods, catalog, config: AuthConfig):
        self.service = service
        self.payment_methods = payment_methods
        self.catalog = catalog
        self.config = config

    def _edited(self, quote: Quote) -> dict:
        """Editor response: the new quote state with its pricing."""
        data = quote.model_dump(mode="json")
        data["pricing"] = self.service.pricing(quote).model_dump(mode="json")
        return data

    def _handle_create(self, data: dict, operator: Operator):
        quote = self.service.create(operator)
        return quote.model_dump(mode="json")

    def _handle_save(self, data: dict, operator: Operator):
        quote = _quote_from(data)
        saved = self.service.save(quote, bool(data.get("as_draft", False)), operator)
        return saved.model_dump(mode="json")

    def _handle_preview(self, data: dict, operator: Operator):
        quote = _quote_from(data)
        return self.service.pricing(quote).model_dump(mode="json")

    def _handle_expire(self, data: dict, operator: Operator):
        quote = self.service.mark_expired(_require(data, "id"), operator)
        return quote.model_dump(mode="json")

    def _handle_reopen(self, data: dict, operator: Operator):
        quote = self.service.reopen(_require(data, "id"), operator)
        return quote.model_dump(mode="json")

    def _handle_share(self, data: dict, operator: Operator):
        quote = self.service.get(_require(data, "id"))
        return {
            "link": share_link(self.config.app_base_url, quote.id),
            "message": share_message(self.config, quote.id),
        }

    # -- Editor operations: take the unsaved quote, return the edited one --

    def _handle_add_item(self, data: dict, operator: Operator):
        item = dict(_require(data, "item"))
        if "amount" in item:
            item["amount_cents"] = parse_amount(item.pop("amount"), "item.amount")
        return self._edited(editing.add_item(_quote_from(data), LineItemCreate(**item)))

    def _handle_remove_item(self, data: dict, operator: Operator):
        return self._edited(editing.remove_item(_quote_from(data), _require(data, "item_id")))

    def _handle_import_service(self, data: dict, operator: Operator):
        service_id = _require(data, "service_id")
        service = self.catalog.get_by_id(service_id)
        if service is None:
            raise ValueError(f"Service {service_id} not found")
        item = self.catalog.to_line_item(service)
        return self._edited(editing.add_line_item(_quote_from(data), item))

    def _handle_add_option(self, data: dict, operator: Operator):
        method_id = _require(data, "payment_method_id")
        method = self.payment_methods.get_by_id(method_id)
        if method is None:
            raise ValueError(f"Payment method {method_id} not found")
        if not method.active:
            raise ValueError(f"Payment method {method_id} is not active")
        installments = parse_installments(data.get("installments", 1))
        quote = editing.add_payment_option(
            _quote_from(data), method, installments, bool(data.get("has_down_payment", False))
        )
        return self._edited(quote)

    def _handle_update_option(self, data: dict, operator: Operator):
        option = dict(_require(data, "option"))
        if "discount_percent" in option:
            option["discount_percent"] = parse_percent(option["discount_percent"], "option.discount_percent")
        if "installments" in option:
            option["installments"] = parse_installments(option["installments"], "option.installments")
        quote = editing.update_payment_option(_quote_from(data), PaymentOption.model_validate(option))
        return self._edited(quote)

    def _handle_remove_option(self, data: dict, operator: Operator):
        return self._edited(editing.remove_payment_option(_quote_from(data), _require(data, "option_id")))


class PaymentMethodHandler:
    ALLOWED_ACTIONS = {"create", "delete"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict, operator: Operator):
        payload = dict(data)
        if "discount_percent" in payload:
            payload["discount_percent"] = parse_percent(payload["discount_percent"])
        method = self.service.create(PaymentMethodCreate(**payload), operator)
        return method.model_dump(mode="json")

    def _handle_delete(self, data: dict, operator: Operator):
        method_id = _require(data, "id")
        deleted = self.service.delete(method_id, operator)
        if not deleted:
            raise ValueError(f"Payment method {method_id} not found")
        return {"deleted": True}


class ServiceHandler:
    ALLOWED_ACTIONS = {"create", "delete", "to_line_item"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict, operator: Operator):
        payload = dict(data)
        if "amount" in payload:
            payload["amount_cents"] = parse_amount(payload.pop("amount"))
        service = self.service.create(ServiceCreate(**payload), operator)
        return service.model_dump(mode="json")

    def _handle_delete(self, data: dict, operator: Operator):
        service_id = _require(data, "id")
        deleted = self.service.delete(service_id, operator)
        if not deleted:
            raise ValueError(f"Service {service_id} not found")
        return {"deleted": True}

    def _handle_to_line_item(self, data: dict, operator: Operator):
        service_id = _require(data, "id")
        service = self.service.get_by_id(service_id)
        if service is None:
            raise ValueError(f"Service {service_id} not found")
        return self.service.to_line_item(service).model_dump(mode="json")
