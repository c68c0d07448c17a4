import os

# Avant tout import de l'app: pas de Redis en tests
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import pytest
from typing import Any, Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from storefront.app import app as fastapi_app
from storefront.catalog.repository import get_catalog_repository
from storefront.payments.client import get_push_payment_gateway
from storefront.payments.models import PaymentRequestResult
from storefront.utils.security import require_admin

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)


class InMemoryCatalogRepository:
    """Dépôt catalogue en mémoire (même contrat que SupabaseCatalogRepository)."""

    def __init__(self, products: Optional[List[dict]] = None, images: Optional[List[dict]] = None):
        self.products: List[dict] = [dict(p) for p in (products or [])]
        self.images: List[dict] = [dict(i) for i in (images or [])]
        self._next_id = 1
        self.calls: List[tuple] = []

    def list_products(self, category: Optional[str] = None) -> List[dict]:
        return [dict(p) for p in self.products if not category or p.get("category") == category]

    def get_product(self, product_id: str) -> Optional[dict]:
        return next((dict(p) for p in self.products if p.get("id") == product_id), None)

    def get_products_by_ids(self, product_ids) -> List[dict]:
        self.calls.append(("get_products_by_ids", list(product_ids)))
        return [dict(p) for p in self.products if p.get("id") in product_ids]

    def get_primary_image_urls(self, product_ids) -> Dict[str, str]:
        self.calls.append(("get_primary_image_urls", list(product_ids)))
        return {
            i["product_id"]: i["image_url"]
            for i in self.images
            if i["product_id"] in product_ids and i.get("is_primary")
        }

    def list_product_images(self, product_id: str) -> List[dict]:
        rows = [dict(i) for i in self.images if i["product_id"] == product_id]
        return sorted(rows, key=lambda i: i.get("display_order", 0))

    def create_product(self, data: Dict[str, Any]) -> Optional[dict]:
        row = {"id": f"new-{self._next_id}", **data}
        self._next_id += 1
        self.products.append(row)
        return dict(row)

    def update_product(self, product_id: str, data: Dict[str, Any]) -> Optional[dict]:
        for p in self.products:
            if p.get("id") == product_id:
                p.update(data)
                return dict(p)
        return None

    def delete_product(self, product_id: str) -> bool:
        self.products = [p for p in self.products if p.get("id") != product_id]
        return True

    def replace_product_images(self, product_id: str, urls: List[str]) -> bool:
        self.images = [i for i in self.images if i["product_id"] != product_id]
        self.images.extend(
            {"product_id": product_id, "image_url": u, "display_order": n, "is_primary": n == 0}
            for n, u in enumerate(urls)
        )
        return True


class FakePushPaymentGateway:
    """Passerelle de paiement factice: enregistre les appels, retourne un résultat fixé."""

    def __init__(self, result: Optional[PaymentRequestResult] = None, exc: Optional[Exception] = None):
        self.result = result or PaymentRequestResult(
            success=True,
            message="Payment request sent. Please check your phone.",
            checkout_request_id="ws_CO_TEST_001",
        )
        self.exc = exc
        self.calls: List[tuple] = []

    def request_push_payment(self, phone_number: str, amount: int) -> PaymentRequestResult:
        self.calls.append((phone_number, amount))
        if self.exc is not None:
            raise self.exc
        return self.result


SAMPLE_PRODUCTS = [
    {"id": "a", "name": "Kettle", "category": "Kitchen", "price": 2000, "rating": 4.5, "reviews": 12,
     "description": "Electric kettle 1.7L", "created_at": "2024-05-01T10:00:00Z"},
    {"id": "b", "name": "Blender", "category": "Kitchen", "price": 3500, "rating": 4.0, "reviews": 8,
     "description": "Countertop blender", "created_at": "2024-05-02T10:00:00Z"},
    {"id": "c", "name": "Radio", "category": "Electronics", "price": 1999.5, "rating": 3.5, "reviews": 3,
     "description": "FM radio", "created_at": "2024-05-03T10:00:00Z"},
]

SAMPLE_IMAGES = [
    {"product_id": "a", "image_url": "https://img.test/kettle-1.jpg", "display_order": 0, "is_primary": True},
    {"product_id": "a", "image_url": "https://img.test/kettle-2.jpg", "display_order": 1, "is_primary": False},
    {"product_id": "b", "image_url": "https://img.test/blender.jpg", "display_order": 0, "is_primary": True},
]


@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def catalog_repo() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository(SAMPLE_PRODUCTS, SAMPLE_IMAGES)

@pytest.fixture()
def push_gateway() -> FakePushPaymentGateway:
    return FakePushPaymentGateway()

# Dépendances externes remplacées pour tous les tests
@pytest.fixture(autouse=True)
def _override_dependencies(app, catalog_repo, push_gateway):
    app.dependency_overrides[get_catalog_repository] = lambda: catalog_repo
    app.dependency_overrides[get_push_payment_gateway] = lambda: push_gateway
    try:
        yield
    finally:
        app.dependency_overrides.clear()

@pytest.fixture(autouse=True)
def mock_supabase(monkeypatch):
    """Aucun accès Supabase réel: les modules qui importent le client reçoivent un MagicMock."""
    fake = MagicMock()
    monkeypatch.setattr("storefront.catalog.repository.get_supabase", lambda: fake)
    monkeypatch.setattr("storefront.catalog.repository.get_service_supabase", lambda: fake)
    monkeypatch.setattr("storefront.health.service.get_supabase", lambda: fake)
    monkeypatch.setattr("storefront.utils.security.get_supabase", lambda: fake)
    return fake

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture
def admin_client(app, client):
    def _override_require_admin():
        return {"id": "admin-user-id", "role": "admin", "email": "admin@example.com"}
    app.dependency_overrides[require_admin] = _override_require_admin
    yield client
    app.dependency_overrides.pop(require_admin, None)

@pytest.fixture
def checkout_form() -> Dict[str, str]:
    """Formulaire valide (noms camelCase comme le front)."""
    return {
        "firstName": "Jane",
        "lastName": "Wanjiku",
        "companyName": "",
        "address": "12 Moi Avenue",
        "addressLine2": "",
        "city": "Nairobi",
        "county": "Nairobi",
        "zip": "00100",
        "phone": "0712 345 678",
        "email": "jane.wanjiku@shop.co.ke",
        "notes": "",
        "paymentMethod": "cash-on-delivery",
    }
