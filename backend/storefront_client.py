"""
storefront_client.py

Copy this file into any service that needs to ask the storefront about stock
(e.g. a POS sync job or a chat bot taking orders).

What it provides:
- A tiny API client for this backend
- Helpers for:
  - Stock check for one product: POST /inventory/check
  - Cart re-validation before checkout: POST /checkout/validate-stock
  - Store settings: GET /settings/weight-label, GET /settings/stock-management

Environment variables expected:
- STOREFRONT_API_URL: e.g. "https://shop.example.com/api"

Dependencies:
- requests (pip install requests)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests


class ApiError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class StorefrontApiClient:
    base_url: str
    timeout: float = 30

    def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        url = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        resp = requests.request(
            method,
            url,
            json=json,
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )
        if resp.status_code >= 400:
            raise ApiError(f"{method} {path} failed ({resp.status_code}): {resp.text}", resp.status_code)
        return resp.json()

    # ----------------------------
    # Stock helpers
    # ----------------------------

    def check_stock(
        self,
        *,
        product_id: str,
        variant_id: Optional[str] = None,
        requested_quantity: Optional[int] = None,
        requested_weight: Optional[float] = None,  # grams, weight-managed products
        existing_quantity: int = 0,
        existing_unit_count: int = 0,
        per_unit_weight: float = 0.0,
    ) -> Dict[str, Any]:
        """
        Calls: POST /inventory/check

        Pass what is already in the cart (existing_*) to get `sufficientForTotal`
        and `headroom` for the cart as a whole.
        """
        payload: Dict[str, Any] = {
            "productId": product_id,
            "variantId": variant_id,
            "existingQuantity": existing_quantity,
            "existingUnitCount": existing_unit_count,
            "perUnitWeight": per_unit_weight,
        }
        if requested_quantity is not None:
            payload["requestedQuantity"] = requested_quantity
        if requested_weight is not None:
            payload["requestedWeight"] = requested_weight
        return self._request("POST", "/inventory/check", json=payload)

    def validate_cart(self, items: List[Dict[str, Any]]) -> List[str]:
        """
        Calls: POST /checkout/validate-stock
        Returns the per-line error messages (empty list when the cart is fine).
        """
        data = self._request("POST", "/checkout/validate-stock", json={"items": items})
        return list(data.get("errors") or [])

    # ----------------------------
    # Settings helpers
    # ----------------------------

    def weight_label(self) -> str:
        try:
            data = self._request("GET", "/settings/weight-label")
        except ApiError:
            # The UI keeps showing grams when the setting cannot be read
            return "g"
        return data.get("weightLabel") or "g"

    def stock_management_enabled(self) -> bool:
        data = self._request("GET", "/settings/stock-management")
        return bool(data.get("stockManagementEnabled"))


def make_client_from_env() -> StorefrontApiClient:
    base_url = os.getenv("STOREFRONT_API_URL", "").strip()
    if not base_url:
        raise RuntimeError("Missing STOREFRONT_API_URL")
    return StorefrontApiClient(base_url=base_url)


if __name__ == "__main__":
    client = make_client_from_env()
    print(f"OK: client configured for {client.base_url} (weight label: {client.weight_label()})")
