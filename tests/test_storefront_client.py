"""Unit tests for the requests-based storefront client."""

from unittest.mock import MagicMock, patch

import pytest

from storefront_client import ApiError, StorefrontApiClient, make_client_from_env


def _response(status_code=200, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.text = text
    return resp


@pytest.fixture
def api():
    return StorefrontApiClient(base_url="https://shop.example.com/api/")


class TestCheckStock:
    def test_posts_camel_case_payload(self, api):
        with patch("storefront_client.requests.request", return_value=_response(payload={"available": True})) as req:
            result = api.check_stock(product_id="p-1", requested_quantity=2, existing_quantity=3)

        assert result == {"available": True}
        method, url = req.call_args.args
        assert method == "POST"
        assert url == "https://shop.example.com/api/inventory/check"
        body = req.call_args.kwargs["json"]
        assert body["productId"] == "p-1"
        assert body["requestedQuantity"] == 2
        assert body["existingQuantity"] == 3
        assert "requestedWeight" not in body

    def test_weight_request(self, api):
        with patch("storefront_client.requests.request", return_value=_response(payload={})) as req:
            api.check_stock(product_id="p-2", requested_weight=250.0, existing_unit_count=1, per_unit_weight=100.0)

        body = req.call_args.kwargs["json"]
        assert body["requestedWeight"] == 250.0
        assert body["existingUnitCount"] == 1
        assert body["perUnitWeight"] == 100.0
        assert "requestedQuantity" not in body

    def test_error_status_raises(self, api):
        with patch(
            "storefront_client.requests.request",
            return_value=_response(status_code=404, text='{"detail":"Product not found"}'),
        ):
            with pytest.raises(ApiError) as exc:
                api.check_stock(product_id="nope", requested_quantity=1)

        assert exc.value.status_code == 404
        assert "Product not found" in str(exc.value)


class TestOtherHelpers:
    def test_validate_cart_returns_errors(self, api):
        payload = {"valid": False, "errors": ["Bread: Unable to verify stock availability."]}
        with patch("storefront_client.requests.request", return_value=_response(payload=payload)) as req:
            errors = api.validate_cart([{"productId": "p-1", "quantity": 1}])

        assert errors == ["Bread: Unable to verify stock availability."]
        assert req.call_args.kwargs["json"] == {"items": [{"productId": "p-1", "quantity": 1}]}

    def test_weight_label(self, api):
        with patch("storefront_client.requests.request", return_value=_response(payload={"weightLabel": "kg"})):
            assert api.weight_label() == "kg"

    def test_weight_label_defaults_to_grams_on_error(self, api):
        with patch("storefront_client.requests.request", return_value=_response(status_code=500)):
            assert api.weight_label() == "g"

    def test_stock_management_enabled(self, api):
        payload = {"success": True, "stockManagementEnabled": True}
        with patch("storefront_client.requests.request", return_value=_response(payload=payload)):
            assert api.stock_management_enabled() is True


class TestFromEnv:
    def test_requires_url(self, monkeypatch):
        monkeypatch.delenv("STOREFRONT_API_URL", raising=False)

        with pytest.raises(RuntimeError, match="STOREFRONT_API_URL"):
            make_client_from_env()

    def test_reads_url(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_API_URL", "http://localhost:8000")

        assert make_client_from_env().base_url == "http://localhost:8000"
