from storefront.payments.models import PaymentRequestResult


def test_mpesa_endpoint_success(client, monkeypatch):
    monkeypatch.setattr(
        "storefront.payments.service.initiate_push_payment",
        lambda phone, amount: PaymentRequestResult(
            success=True,
            message="Payment request sent. Please check your phone.",
            checkout_request_id="ws_CO_42",
        ),
    )

    r = client.post("/api/v1/payments/mpesa", json={"phoneNumber": "0712345678", "amount": 4000})

    assert r.status_code == 200
    assert r.json() == {
        "success": True,
        "message": "Payment request sent. Please check your phone.",
        "checkoutRequestID": "ws_CO_42",
    }


def test_mpesa_endpoint_failure_is_400(client, monkeypatch):
    monkeypatch.setattr(
        "storefront.payments.service.initiate_push_payment",
        lambda phone, amount: PaymentRequestResult(success=False, error="M-Pesa credentials not configured"),
    )

    r = client.post("/api/v1/payments/mpesa", json={"phoneNumber": "0712345678", "amount": 10})

    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "M-Pesa credentials not configured"}


def test_mpesa_endpoint_without_credentials_reports_error(client, monkeypatch):
    # Aucun identifiant Daraja: l'appel réel échoue proprement
    monkeypatch.setattr("storefront.config.MPESA_CONSUMER_KEY", "")
    r = client.post("/api/v1/payments/mpesa", json={"phoneNumber": "0712345678", "amount": 10})
    assert r.status_code == 400
    assert r.json()["error"] == "M-Pesa credentials not configured"


def test_mpesa_endpoint_rejects_non_positive_amount(client):
    r = client.post("/api/v1/payments/mpesa", json={"phoneNumber": "0712345678", "amount": 0})
    assert r.status_code == 422


def test_mpesa_callback_acknowledges_without_touching_cart(client):
    client.post("/api/v1/cart/items", json={"product_id": "a"})
    payload = {
        "Body": {
            "stkCallback": {
                "MerchantRequestID": "m-1",
                "CheckoutRequestID": "ws_CO_42",
                "ResultCode": 1032,
                "ResultDesc": "Request cancelled by user",
            }
        }
    }

    r = client.post("/api/v1/payments/mpesa/callback", json=payload)

    assert r.status_code == 200
    assert r.json() == {"ResultCode": 0, "ResultDesc": "Accepted"}
    assert client.get("/api/v1/cart/count").json() == {"count": 1}


def test_mpesa_callback_tolerates_invalid_body(client):
    r = client.post("/api/v1/payments/mpesa/callback", content=b"not json", headers={"content-type": "application/json"})
    assert r.status_code == 200
