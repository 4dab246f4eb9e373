from __future__ import annotations

import uuid
from decimal import Decimal

from conftest import _auth_headers


def _submit(client, artist, amount="100"):
    r = client.post(
        f"/v1/artists/{artist.artist_id}/withdrawals",
        json={
            "amount": amount,
            "account_name": "Ada Lovelace",
            "account_number": "0123456789",
            "bank_name": "First Bank",
        },
        headers=_auth_headers(artist.owner.token),
    )
    assert r.status_code == 201, r.text
    return r.json()["id"]


def _set_status(client, admin_user, withdrawal_id, status):
    return client.post(
        f"/v1/admin/withdrawals/{withdrawal_id}/status",
        json={"status": status},
        headers=_auth_headers(admin_user.token),
    )


def test_non_admin_forbidden(client, artist):
    r = client.get("/v1/admin/withdrawals", headers=_auth_headers(artist.owner.token))
    assert r.status_code == 403
    assert r.json()["detail"] == "ADMIN_REQUIRED"


def test_admin_lists_withdrawals_by_status(client, admin_user, artist):
    wid = _submit(client, artist)

    r = client.get("/v1/admin/withdrawals?status=PENDING", headers=_auth_headers(admin_user.token))
    assert r.status_code == 200, r.text
    rows = r.json()["withdrawals"]
    assert [w["id"] for w in rows] == [wid]
    assert rows[0]["artist_name"] == "Burna Test"

    r = client.get("/v1/admin/withdrawals?status=COMPLETED", headers=_auth_headers(admin_user.token))
    assert r.json()["withdrawals"] == []


def test_admin_list_unknown_status(client, admin_user):
    r = client.get("/v1/admin/withdrawals?status=PAID", headers=_auth_headers(admin_user.token))
    assert r.status_code == 422
    assert r.json()["detail"]["code"] == "INVALID_STATUS"


def test_approve_then_complete(client, admin_user, artist, store):
    store.artists[artist.artist_id]["credit_balance"] = Decimal("30.00")
    wid = _submit(client, artist)

    r = _set_status(client, admin_user, wid, "APPROVED")
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "APPROVED"
    assert r.json()["approved_at"] is not None

    artist_row = store.get_artist(artist.artist_id)
    assert artist_row.available_balance == Decimal("400.00")
    assert artist_row.credit_balance == Decimal("0.00")

    r = _set_status(client, admin_user, wid, "COMPLETED")
    assert r.status_code == 200, r.text
    assert r.json()["processed_at"] is not None

    r = client.get(
        f"/v1/artists/{artist.artist_id}/credit-transactions",
        headers=_auth_headers(artist.owner.token),
    )
    txs = r.json()["transactions"]
    assert len(txs) == 1
    assert txs[0]["type"] == "withdrawal_deduction"
    assert txs[0]["amount"] == "30.00"


def test_invalid_transition_is_conflict(client, admin_user, artist):
    wid = _submit(client, artist)
    r = _set_status(client, admin_user, wid, "COMPLETED")
    assert r.status_code == 409, r.text
    assert r.json()["detail"]["code"] == "INVALID_TRANSITION"


def test_approval_with_insufficient_balance_leaves_pending(client, admin_user, artist, store):
    wid = _submit(client, artist)
    store.artists[artist.artist_id]["available_balance"] = Decimal("40.00")

    r = _set_status(client, admin_user, wid, "APPROVED")
    assert r.status_code == 409, r.text
    assert r.json()["detail"]["code"] == "INSUFFICIENT_BALANCE"

    assert store.get_withdrawal(uuid.UUID(wid)).status == "PENDING"
    assert store.get_artist(artist.artist_id).available_balance == Decimal("40.00")
    assert [r["event"] for r in store.outbox.values()] == ["requested"]


def test_reject_with_reason(client, admin_user, artist, store):
    wid = _submit(client, artist)

    r = client.post(
        f"/v1/admin/withdrawals/{wid}/reject",
        json={"reason": "Account name does not match"},
        headers=_auth_headers(admin_user.token),
    )
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "REJECTED"
    assert r.json()["rejection_reason"] == "Account name does not match"


def test_reject_requires_reason(client, admin_user, artist):
    wid = _submit(client, artist)
    r = client.post(
        f"/v1/admin/withdrawals/{wid}/reject",
        json={"reason": ""},
        headers=_auth_headers(admin_user.token),
    )
    assert r.status_code == 422
    assert r.json()["detail"]["code"] == "MISSING_FIELD"


def test_unknown_withdrawal_is_404(client, admin_user):
    r = _set_status(client, admin_user, uuid.uuid4(), "APPROVED")
    assert r.status_code == 404
    assert r.json()["detail"]["code"] == "WITHDRAWAL_NOT_FOUND"


def test_admin_adds_credit(client, admin_user, artist):
    r = client.post(
        f"/v1/admin/artists/{artist.artist_id}/credits",
        json={"amount": "25"},
        headers=_auth_headers(admin_user.token),
    )
    assert r.status_code == 200, r.text
    assert r.json()["credit_balance"] == "25.00"

    r = client.post(
        f"/v1/admin/artists/{artist.artist_id}/credits",
        json={"amount": "5.50", "description": "Promo advance"},
        headers=_auth_headers(admin_user.token),
    )
    assert r.json()["credit_balance"] == "30.50"


def test_admin_credit_rejects_non_positive(client, admin_user, artist):
    r = client.post(
        f"/v1/admin/artists/{artist.artist_id}/credits",
        json={"amount": "0"},
        headers=_auth_headers(admin_user.token),
    )
    assert r.status_code == 422
    assert r.json()["detail"]["code"] == "INVALID_AMOUNT"


def test_admin_credit_unknown_artist(client, admin_user):
    r = client.post(
        f"/v1/admin/artists/{uuid.uuid4()}/credits",
        json={"amount": "10"},
        headers=_auth_headers(admin_user.token),
    )
    assert r.status_code == 404
    assert r.json()["detail"]["code"] == "ARTIST_NOT_FOUND"


def test_admin_adds_earnings(client, admin_user, artist):
    r = client.post(
        f"/v1/admin/artists/{artist.artist_id}/earnings",
        json={"amount": "120"},
        headers=_auth_headers(admin_user.token),
    )
    assert r.status_code == 200, r.text
    assert r.json()["available_balance"] == "620.00"


def test_admin_process_notifications_once(client, admin_user, artist, dispatcher, store):
    _submit(client, artist)

    r = client.post(
        "/v1/admin/notifications/process-once",
        json={"batch_size": 10},
        headers=_auth_headers(admin_user.token),
    )
    assert r.status_code == 200, r.text
    assert r.json() == {"ok": True, "processed": 1}
    assert [s["event"] for s in dispatcher.sent] == ["requested"]
    assert [row["status"] for row in store.outbox.values()] == ["SENT"]
