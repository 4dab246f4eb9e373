from __future__ import annotations

import uuid

from conftest import _auth_headers


def _withdraw(client, artist, amount="100", **overrides):
    body = {
        "amount": amount,
        "account_name": "Ada Lovelace",
        "account_number": "0123456789",
        "bank_name": "First Bank",
    }
    body.update(overrides)
    return client.post(
        f"/v1/artists/{artist.artist_id}/withdrawals",
        json=body,
        headers=_auth_headers(artist.owner.token),
    )


def test_balance(client, artist, store):
    store.artists[artist.artist_id]["credit_balance"] = store.artists[artist.artist_id]["credit_balance"] + 30
    r = client.get(f"/v1/artists/{artist.artist_id}/balance", headers=_auth_headers(artist.owner.token))
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["available_balance"] == "500.00"
    assert data["credit_balance"] == "30.00"
    assert data["pending_withdrawals"] == "0.00"
    assert data["exchange_rate"] == "1250"
    assert data["min_withdrawal"] == "50"
    assert data["max_withdrawal"] == "10000"


def test_create_withdrawal(client, artist, store):
    r = _withdraw(client, artist)
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["status"] == "PENDING"
    assert data["amount"] == "100.00"
    assert data["final_amount"] == "100.00"
    assert data["processed_at"] is None
    assert data["artist_email"] == "burna@example.com"

    r = client.get(f"/v1/artists/{artist.artist_id}/balance", headers=_auth_headers(artist.owner.token))
    assert r.json()["pending_withdrawals"] == "100.00"


def test_create_withdrawal_below_minimum_returns_toast(client, artist, store):
    r = _withdraw(client, artist, amount="20")
    assert r.status_code == 422, r.text
    detail = r.json()["detail"]
    assert detail["code"] == "BELOW_MINIMUM"
    assert detail["title"] == "Amount too low"
    assert "$50.00" in detail["description"]
    assert store.withdrawals == {}


def test_create_withdrawal_insufficient_balance(client, artist):
    r = _withdraw(client, artist, amount="900")
    assert r.status_code == 409, r.text
    assert r.json()["detail"]["code"] == "INSUFFICIENT_BALANCE"


def test_create_withdrawal_missing_bank_details(client, artist):
    r = _withdraw(client, artist, bank_name=" ")
    assert r.status_code == 422, r.text
    assert r.json()["detail"]["code"] == "MISSING_FIELD"


def test_second_request_refused_while_first_outstanding(client, artist, store):
    assert _withdraw(client, artist).status_code == 201

    r = _withdraw(client, artist, amount="60")
    assert r.status_code == 409, r.text
    assert r.json()["detail"]["code"] == "PENDING_REQUEST_EXISTS"
    assert len(store.withdrawals) == 1


def test_failed_request_writes_nothing(client, artist, store, monkeypatch):
    def _boom(*args, **kwargs):
        raise RuntimeError("activity store down")

    monkeypatch.setattr(store, "insert_activity_log", _boom)

    r = _withdraw(client, artist)
    assert r.status_code == 500, r.text
    assert r.json() == {"detail": "Internal server error"}
    assert store.withdrawals == {}
    assert store.outbox == {}


def test_list_withdrawals_newest_first(client, artist, store):
    store.add_withdrawal_row(artist.artist_id, status="COMPLETED", amount="70")
    assert _withdraw(client, artist).status_code == 201

    r = client.get(f"/v1/artists/{artist.artist_id}/withdrawals", headers=_auth_headers(artist.owner.token))
    assert r.status_code == 200, r.text
    rows = r.json()["withdrawals"]
    assert [w["status"] for w in rows] == ["PENDING", "COMPLETED"]


def test_activity_and_credit_history(client, artist):
    assert _withdraw(client, artist).status_code == 201

    r = client.get(f"/v1/artists/{artist.artist_id}/activity", headers=_auth_headers(artist.owner.token))
    assert r.status_code == 200, r.text
    activities = r.json()["activities"]
    assert activities[0]["activity_type"] == "withdrawal_requested"
    assert activities[0]["title"] == "Withdrawal requested"

    r = client.get(
        f"/v1/artists/{artist.artist_id}/credit-transactions",
        headers=_auth_headers(artist.owner.token),
    )
    assert r.status_code == 200, r.text
    assert r.json()["transactions"] == []


def test_requires_token(client, artist):
    r = client.get(f"/v1/artists/{artist.artist_id}/balance")
    assert r.status_code == 401


def test_rejects_bad_token(client, artist):
    r = client.get(f"/v1/artists/{artist.artist_id}/balance", headers=_auth_headers("not-a-jwt"))
    assert r.status_code == 401


def test_other_users_cannot_see_artist(client, artist, outsider):
    r = client.get(f"/v1/artists/{artist.artist_id}/balance", headers=_auth_headers(outsider.token))
    assert r.status_code == 403
    assert r.json()["detail"] == "ARTIST_NOT_OWNED"


def test_team_member_can_withdraw(client, artist, store, outsider):
    store.members.add((artist.artist_id, outsider.user_id))
    r = client.post(
        f"/v1/artists/{artist.artist_id}/withdrawals",
        json={"amount": "75", "account_name": "A", "account_number": "0123456789", "bank_name": "B"},
        headers=_auth_headers(outsider.token),
    )
    assert r.status_code == 201, r.text
    assert r.json()["user_id"] == str(outsider.user_id)


def test_unknown_artist_is_forbidden(client, artist):
    r = client.get(f"/v1/artists/{uuid.uuid4()}/balance", headers=_auth_headers(artist.owner.token))
    assert r.status_code == 403
