import pytest

from sellerpackages.models import SellerPackage

pytestmark = pytest.mark.django_db


def test_seeded_packages_are_listed_cheapest_first(api_client):
    response = api_client.get('/api/packages/')
    assert response.status_code == 200
    packages = response.json()
    assert [p["id"] for p in packages] == ["basic", "standard", "premium"]
    assert [p["paymentAmount"] for p in packages] == [5, 10, 15]
    assert packages[1]["recommended"] is True


def test_inactive_packages_are_hidden(api_client):
    SellerPackage.objects.filter(slug="premium").update(is_active=False)
    ids = [p["id"] for p in api_client.get('/api/packages/').json()]
    assert "premium" not in ids


def test_package_detail(api_client):
    response = api_client.get('/api/packages/basic/')
    assert response.status_code == 200
    assert response.json()["price"] == 800
    assert response.json()["photoUploads"] == 1


def test_missing_package_is_404(api_client):
    response = api_client.get('/api/packages/gold/')
    assert response.status_code == 404
    assert response.json() == {"error": "Invalid or inactive package selected"}
