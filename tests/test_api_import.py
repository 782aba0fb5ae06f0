from __future__ import annotations

import uuid

import httpx
import pytest

from ledgerdesk.core.database import get_db
from main import create_app


@pytest.fixture()
async def client(session_factory):
    app = create_app()

    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


def _base(tenant) -> str:
    return f"/api/tenant/{tenant.key}/import"


async def _upload(client, tenant, content: bytes, file_name: str = "january.ofx") -> httpx.Response:
    return await client.post(
        f"{_base(tenant)}/upload",
        files={"file": (file_name, content, "application/octet-stream")},
    )


async def test_upload_and_list_review(client, tenant, sample_ofx) -> None:
    response = await _upload(client, tenant, sample_ofx)

    assert response.status_code == 200
    body = response.json()
    assert body["imported_count"] == 3
    assert body["new_count"] == 3
    assert body["errors"] == []

    review = await client.get(f"{_base(tenant)}/review", params={"page_number": 1, "page_size": 2})
    assert review.status_code == 200
    page = review.json()
    assert [row["external_id"] for row in page["items"]] == ["FIT001", "FIT002"]
    assert page["items"][0]["payee"] == "WALMART SUPERCENTER #1234"
    assert page["items"][0]["duplicate_status"] == "new"
    assert page["metadata"]["total_count"] == 3
    assert page["metadata"]["has_next_page"] is True


async def test_upload_reports_parse_errors(client, tenant, make_ofx) -> None:
    content = make_ofx(
        [
            {"fitid": "X1", "posted": "20240102", "amount": "-1.00", "name": "Store"},
            {"fitid": "X2", "posted": "20240103", "amount": "-2.00"},
        ]
    )

    response = await _upload(client, tenant, content)

    body = response.json()
    assert body["imported_count"] == 1
    assert body["errors"][0]["code"] == "missing_payee"
    assert body["errors"][0]["file_name"] == "january.ofx"


@pytest.mark.parametrize(
    ("file_name", "content", "expected_status"),
    [
        ("statement.csv", b"date,amount", 400),
        ("statement.ofx", b"", 400),
    ],
)
async def test_upload_rejects_bad_files(client, tenant, file_name, content, expected_status) -> None:
    response = await _upload(client, tenant, content, file_name)

    assert response.status_code == expected_status


async def test_unknown_tenant_is_404(client) -> None:
    response = await client.get(f"/api/tenant/{uuid.uuid4()}/import/review")

    assert response.status_code == 404
    assert response.json()["detail"] == "Tenant not found"


async def test_selection_and_summary(client, tenant, sample_ofx) -> None:
    await _upload(client, tenant, sample_ofx)
    rows = (await client.get(f"{_base(tenant)}/review")).json()["items"]

    response = await client.post(
        f"{_base(tenant)}/review/selection",
        json={"keys": [rows[0]["key"]], "is_selected": False},
    )
    assert response.status_code == 204

    summary = (await client.get(f"{_base(tenant)}/review/summary")).json()
    assert summary["total_count"] == 3
    assert summary["selected_count"] == 2

    assert (await client.post(f"{_base(tenant)}/review/deselect-all")).status_code == 204
    assert (await client.get(f"{_base(tenant)}/review/summary")).json()["selected_count"] == 0

    assert (await client.post(f"{_base(tenant)}/review/select-all")).status_code == 204
    assert (await client.get(f"{_base(tenant)}/review/summary")).json()["selected_count"] == 3


async def test_complete_review_with_keys(client, tenant, sample_ofx) -> None:
    await _upload(client, tenant, sample_ofx)
    rows = (await client.get(f"{_base(tenant)}/review")).json()["items"]

    response = await client.post(
        f"{_base(tenant)}/review/complete",
        json={"accepted_keys": [rows[1]["key"]]},
    )

    assert response.status_code == 200
    assert response.json() == {"accepted_count": 1, "rejected_count": 2}
    assert (await client.get(f"{_base(tenant)}/review")).json()["items"] == []

    again = (await _upload(client, tenant, sample_ofx)).json()
    assert again["exact_duplicate_count"] == 1
    assert again["new_count"] == 2


async def test_complete_review_without_body_uses_selection(client, tenant, sample_ofx) -> None:
    await _upload(client, tenant, sample_ofx)

    response = await client.post(f"{_base(tenant)}/review/complete")

    assert response.json() == {"accepted_count": 3, "rejected_count": 0}


async def test_delete_pending_review(client, tenant, sample_ofx) -> None:
    await _upload(client, tenant, sample_ofx)

    response = await client.delete(f"{_base(tenant)}/review")

    assert response.status_code == 200
    assert response.json() == {"deleted_count": 3}
    assert (await client.get(f"{_base(tenant)}/review/summary")).json()["total_count"] == 0


async def test_health(client) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}
