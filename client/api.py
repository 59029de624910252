"""
Thin REST client for the Flow Sight backend.

Every call goes through ``ApiClient._request`` so that transport failures,
HTTP errors and malformed bodies surface as one of the ``client.errors``
types. Pages catch ``ApiError`` and show a notification; nothing here retries.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from core.config import ClientConfig
from core.logging_setup import get_logger

from .errors import ApiError, ResponseFormatError, TransportError, UnauthorizedError
from .models import (
    AppSetting,
    Asset,
    BankAccount,
    CardMonthlyTotal,
    CreditCard,
    DailyProjection,
    DashboardSummary,
    IncomeSource,
    MonthlyIncomeRecord,
    RecurringPayment,
    User,
)

log = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)
TokenProvider = Callable[[], Optional[str]]


def _error_message(response: requests.Response) -> str:
    message = f"HTTP error! status: {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return message
    if isinstance(body, dict):
        detail = body.get("message") or body.get("error")
        if detail:
            message = f"{message} ({detail})"
    return message


class ApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        token_provider: Optional[TokenProvider] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._token_provider = token_provider
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()

    @classmethod
    def from_config(
        cls, config: ClientConfig, *, token_provider: Optional[TokenProvider] = None
    ) -> "ApiClient":
        return cls(config.base_url, token_provider=token_provider, timeout=config.request_timeout)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._token_provider() if self._token_provider is not None else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        payload: Any = None,
    ) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self._session.request(
                method,
                url,
                params=dict(params) if params else None,
                json=payload,
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            log.warning("%s %s failed: %s", method, endpoint, exc)
            raise TransportError(f"Request failed: {exc}", path=endpoint) from exc

        log.debug("%s %s -> %s", method, endpoint, response.status_code)

        if response.status_code == 401:
            log.warning("%s %s rejected: unauthorized", method, endpoint)
            raise UnauthorizedError(_error_message(response), status_code=401, path=endpoint)
        if not response.ok:
            log.warning("%s %s -> HTTP %s", method, endpoint, response.status_code)
            raise ApiError(_error_message(response), status_code=response.status_code, path=endpoint)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ResponseFormatError(
                "Response body is not valid JSON", status_code=response.status_code, path=endpoint
            ) from exc

    def _parse(self, model: Type[M], body: Any, endpoint: str) -> M:
        try:
            return model.model_validate(body)
        except ValidationError as exc:
            raise ResponseFormatError(
                f"Unexpected {model.__name__} payload: {exc.error_count()} error(s)", path=endpoint
            ) from exc

    def _parse_list(self, model: Type[M], body: Any, endpoint: str) -> List[M]:
        if body is None:
            return []
        if not isinstance(body, list):
            raise ResponseFormatError(f"Expected a list of {model.__name__}", path=endpoint)
        return [self._parse(model, item, endpoint) for item in body]

    # generic CRUD over one resource collection
    def _list(self, model: Type[M], endpoint: str, params: Optional[Mapping[str, Any]] = None) -> List[M]:
        return self._parse_list(model, self._request("GET", endpoint, params=params), endpoint)

    def _get(self, model: Type[M], endpoint: str) -> M:
        return self._parse(model, self._request("GET", endpoint), endpoint)

    def _create(self, model: Type[M], endpoint: str, data: Mapping[str, Any]) -> M:
        return self._parse(model, self._request("POST", endpoint, payload=dict(data)), endpoint)

    def _update(self, model: Type[M], endpoint: str, data: Mapping[str, Any]) -> M:
        return self._parse(model, self._request("PUT", endpoint, payload=dict(data)), endpoint)

    def _delete(self, endpoint: str) -> None:
        self._request("DELETE", endpoint)

    # ------------------------------------------------------------------
    # Credit cards
    # ------------------------------------------------------------------
    def get_credit_cards(self) -> List[CreditCard]:
        return self._list(CreditCard, "/credit-cards")

    def get_credit_card(self, card_id: str) -> CreditCard:
        return self._get(CreditCard, f"/credit-cards/{card_id}")

    def create_credit_card(self, data: Mapping[str, Any]) -> CreditCard:
        return self._create(CreditCard, "/credit-cards", data)

    def update_credit_card(self, card_id: str, data: Mapping[str, Any]) -> CreditCard:
        return self._update(CreditCard, f"/credit-cards/{card_id}", data)

    def delete_credit_card(self, card_id: str) -> None:
        self._delete(f"/credit-cards/{card_id}")

    # ------------------------------------------------------------------
    # Bank accounts
    # ------------------------------------------------------------------
    def get_bank_accounts(self) -> List[BankAccount]:
        return self._list(BankAccount, "/bank-accounts")

    def get_bank_account(self, account_id: str) -> BankAccount:
        return self._get(BankAccount, f"/bank-accounts/{account_id}")

    def create_bank_account(self, data: Mapping[str, Any]) -> BankAccount:
        return self._create(BankAccount, "/bank-accounts", data)

    def update_bank_account(self, account_id: str, data: Mapping[str, Any]) -> BankAccount:
        return self._update(BankAccount, f"/bank-accounts/{account_id}", data)

    def delete_bank_account(self, account_id: str) -> None:
        self._delete(f"/bank-accounts/{account_id}")

    # ------------------------------------------------------------------
    # Assets (cards and loans)
    # ------------------------------------------------------------------
    def get_assets(self) -> List[Asset]:
        return self._list(Asset, "/assets")

    def get_asset(self, asset_id: str) -> Asset:
        return self._get(Asset, f"/assets/{asset_id}")

    def create_asset(self, data: Mapping[str, Any]) -> Asset:
        return self._create(Asset, "/assets", data)

    def update_asset(self, asset_id: str, data: Mapping[str, Any]) -> Asset:
        return self._update(Asset, f"/assets/{asset_id}", data)

    def delete_asset(self, asset_id: str) -> None:
        self._delete(f"/assets/{asset_id}")

    # ------------------------------------------------------------------
    # Card monthly totals
    # ------------------------------------------------------------------
    def get_card_monthly_totals(self, asset_id: str) -> List[CardMonthlyTotal]:
        return self._list(CardMonthlyTotal, "/card-monthly-totals", {"asset_id": asset_id})

    def get_card_monthly_total(self, total_id: str) -> CardMonthlyTotal:
        return self._get(CardMonthlyTotal, f"/card-monthly-totals/{total_id}")

    def create_card_monthly_total(self, data: Mapping[str, Any]) -> CardMonthlyTotal:
        return self._create(CardMonthlyTotal, "/card-monthly-totals", data)

    def update_card_monthly_total(self, total_id: str, data: Mapping[str, Any]) -> CardMonthlyTotal:
        return self._update(CardMonthlyTotal, f"/card-monthly-totals/{total_id}", data)

    def delete_card_monthly_total(self, total_id: str) -> None:
        self._delete(f"/card-monthly-totals/{total_id}")

    # ------------------------------------------------------------------
    # Income sources and monthly income records
    # ------------------------------------------------------------------
    def get_income_sources(self) -> List[IncomeSource]:
        return self._list(IncomeSource, "/income-sources")

    def get_income_source(self, source_id: str) -> IncomeSource:
        return self._get(IncomeSource, f"/income-sources/{source_id}")

    def create_income_source(self, data: Mapping[str, Any]) -> IncomeSource:
        return self._create(IncomeSource, "/income-sources", data)

    def update_income_source(self, source_id: str, data: Mapping[str, Any]) -> IncomeSource:
        return self._update(IncomeSource, f"/income-sources/{source_id}", data)

    def delete_income_source(self, source_id: str) -> None:
        self._delete(f"/income-sources/{source_id}")

    def get_monthly_income_records(self, income_source_id: str) -> List[MonthlyIncomeRecord]:
        return self._list(
            MonthlyIncomeRecord, "/monthly-income-records", {"income_source_id": income_source_id}
        )

    def get_monthly_income_record(self, record_id: str) -> MonthlyIncomeRecord:
        return self._get(MonthlyIncomeRecord, f"/monthly-income-records/{record_id}")

    def create_monthly_income_record(self, data: Mapping[str, Any]) -> MonthlyIncomeRecord:
        return self._create(MonthlyIncomeRecord, "/monthly-income-records", data)

    def update_monthly_income_record(self, record_id: str, data: Mapping[str, Any]) -> MonthlyIncomeRecord:
        return self._update(MonthlyIncomeRecord, f"/monthly-income-records/{record_id}", data)

    def delete_monthly_income_record(self, record_id: str) -> None:
        self._delete(f"/monthly-income-records/{record_id}")

    # ------------------------------------------------------------------
    # Recurring payments
    # ------------------------------------------------------------------
    def get_recurring_payments(self) -> List[RecurringPayment]:
        return self._list(RecurringPayment, "/recurring-payments")

    def get_recurring_payment(self, payment_id: str) -> RecurringPayment:
        return self._get(RecurringPayment, f"/recurring-payments/{payment_id}")

    def create_recurring_payment(self, data: Mapping[str, Any]) -> RecurringPayment:
        return self._create(RecurringPayment, "/recurring-payments", data)

    def update_recurring_payment(self, payment_id: str, data: Mapping[str, Any]) -> RecurringPayment:
        return self._update(RecurringPayment, f"/recurring-payments/{payment_id}", data)

    def delete_recurring_payment(self, payment_id: str) -> None:
        self._delete(f"/recurring-payments/{payment_id}")

    # ------------------------------------------------------------------
    # Cashflow projection, dashboard, settings, auth
    # ------------------------------------------------------------------
    def get_cashflow_projection(self, months: int = 6, *, only_changes: bool = False) -> List[DailyProjection]:
        """Daily projection records for ``months`` months from the current month."""
        if isinstance(months, bool) or not isinstance(months, int) or months <= 0:
            raise ValueError(f"months must be a positive integer, got {months!r}")
        params = {"months": months, "onlyChanges": "true" if only_changes else "false"}
        return self._list(DailyProjection, "/cashflow-projection", params)

    def get_dashboard_summary(self) -> DashboardSummary:
        return self._get(DashboardSummary, "/dashboard/summary")

    def get_settings(self) -> List[AppSetting]:
        return self._list(AppSetting, "/settings")

    def update_settings(self, settings: Mapping[str, str]) -> Dict[str, str]:
        body = self._request("PUT", "/settings", payload={"settings": dict(settings)})
        if body is None:
            return dict(settings)
        if not isinstance(body, dict):
            raise ResponseFormatError("Expected a settings object", path="/settings")
        return {str(k): str(v) for k, v in body.items()}

    def get_me(self) -> User:
        return self._get(User, "/auth/me")

    def health(self) -> Any:
        return self._request("GET", "/health")
