"""HTTP tests for /api/v1/customers."""

from __future__ import annotations

from uuid import uuid4

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from retailpos.app.models.customer import Customer
from retailpos.app.models.inventory import Product
from retailpos.tests.conftest import auth

URL = "/api/v1/customers"


class TestCreateCustomer:
    def test_round_trip(self, client: TestClient, staff_token: str) -> None:
        payload = {
            "name": "Jane Doe",
            "email": "jane@test.com",
            "phone": "0899999999",
            "is_member": True,
        }
        resp = client.post(URL, json=payload, headers=auth(staff_token))
        assert resp.status_code == 201

        fetched = client.get(f"{URL}/{resp.json()['id']}", headers=auth(staff_token)).json()
        for key, value in payload.items():
            assert fetched[key] == value

    def test_contact_fields_optional(self, client: TestClient, staff_token: str) -> None:
        resp = client.post(
            URL, json={"name": "Walk Up", "email": ""}, headers=auth(staff_token)
        )
        assert resp.status_code == 201
        assert resp.json()["email"] is None
        assert resp.json()["is_member"] is False

    def test_duplicate_email(
        self, client: TestClient, db: Session, staff_token: str, member: Customer
    ) -> None:
        resp = client.post(
            URL,
            json={"name": "Impostor", "email": "member@test.com"},
            headers=auth(staff_token),
        )
        assert resp.status_code == 409
        assert resp.json()["field"] == "email"
        assert db.query(Customer).count() == 1

    def test_duplicate_phone(
        self, client: TestClient, staff_token: str, member: Customer
    ) -> None:
        resp = client.post(
            URL, json={"name": "Other", "phone": "0811111111"}, headers=auth(staff_token)
        )
        assert resp.status_code == 409
        assert resp.json()["field"] == "phone"

    def test_blank_name(self, client: TestClient, staff_token: str) -> None:
        resp = client.post(URL, json={"name": ""}, headers=auth(staff_token))
        assert resp.status_code == 400
        assert resp.json()["field"] == "name"


class TestSearchCustomers:
    def test_search_by_name_email_or_phone(
        self,
        client: TestClient,
        staff_token: str,
        member: Customer,
        non_member: Customer,
    ) -> None:
        by_name = client.get(URL, params={"q": "regular"}, headers=auth(staff_token)).json()
        assert [c["id"] for c in by_name] == [str(non_member.id)]

        by_phone = client.get(URL, params={"q": "0811"}, headers=auth(staff_token)).json()
        assert [c["id"] for c in by_phone] == [str(member.id)]

        everyone = client.get(URL, headers=auth(staff_token)).json()
        assert len(everyone) == 2


class TestUpdateCustomer:
    def test_toggle_membership(
        self, client: TestClient, staff_token: str, non_member: Customer
    ) -> None:
        resp = client.put(
            f"{URL}/{non_member.id}", json={"is_member": True}, headers=auth(staff_token)
        )
        assert resp.status_code == 200
        assert resp.json()["is_member"] is True
        assert resp.json()["email"] == "regular@test.com"

    def test_email_taken_by_other(
        self,
        client: TestClient,
        staff_token: str,
        member: Customer,
        non_member: Customer,
    ) -> None:
        resp = client.put(
            f"{URL}/{non_member.id}",
            json={"email": "member@test.com"},
            headers=auth(staff_token),
        )
        assert resp.status_code == 409

    def test_missing_customer(self, client: TestClient, staff_token: str) -> None:
        resp = client.put(f"{URL}/{uuid4()}", json={"name": "X"}, headers=auth(staff_token))
        assert resp.status_code == 404


class TestDeleteCustomer:
    def test_admin_deletes(
        self, client: TestClient, admin_token: str, non_member: Customer
    ) -> None:
        resp = client.delete(f"{URL}/{non_member.id}", headers=auth(admin_token))
        assert resp.status_code == 200

    def test_staff_cannot_delete(
        self, client: TestClient, staff_token: str, non_member: Customer
    ) -> None:
        resp = client.delete(f"{URL}/{non_member.id}", headers=auth(staff_token))
        assert resp.status_code == 403

    def test_customer_with_sales_is_kept(
        self,
        client: TestClient,
        db: Session,
        admin_token: str,
        staff_token: str,
        member: Customer,
        product_p1: Product,
    ) -> None:
        client.post(
            "/api/v1/sales",
            json={
                "items": [{"product_id": str(product_p1.id), "quantity": 1}],
                "customer_id": str(member.id),
            },
            headers=auth(staff_token),
        )
        resp = client.delete(f"{URL}/{member.id}", headers=auth(admin_token))
        assert resp.status_code == 409
        assert resp.json()["entity"] == "Customer"

        db.expire_all()
        assert db.get(Customer, member.id) is not None
