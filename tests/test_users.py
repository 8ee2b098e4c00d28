from conftest import ADDRESS, create_user, login


def test_own_profile_has_no_secrets(user_client):
    resp = user_client.get("/users/own")
    assert resp.status_code == 200
    body = resp.json()
    assert body["email"] == "alice@example.com"
    assert body["role"] == "user"
    assert "password_hash" not in body
    assert "salt" not in body


def test_update_own_profile(user_client):
    resp = user_client.patch(
        f"/users/{user_client.user_id}",
        json={"name": "Alice A.", "addresses": [ADDRESS]},
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Alice A."
    assert resp.json()["addresses"][0]["city"] == "Pune"


def test_cannot_edit_someone_else(user_client, other_client):
    resp = other_client.patch(f"/users/{user_client.user_id}", json={"name": "Mallory"})
    assert resp.status_code == 403


def test_cannot_promote_self(user_client):
    resp = user_client.patch(f"/users/{user_client.user_id}", json={"role": "admin"})
    assert resp.status_code == 403


def test_admin_changes_role(admin_client, user_client):
    resp = admin_client.patch(f"/users/{user_client.user_id}", json={"role": "admin"})
    assert resp.status_code == 200
    assert resp.json()["role"] == "admin"

    assert admin_client.patch(f"/users/{user_client.user_id}", json={"role": "root"}).status_code == 400
    assert admin_client.patch(f"/users/{admin_client.user_id}", json={"role": "user"}).status_code == 400
    assert admin_client.patch("/users/999", json={"name": "ghost"}).status_code == 404


def test_demotion_closes_open_sessions(context, admin_client, make_client):
    demoted = make_client()
    demoted_id = create_user(context, "carol@example.com", role="admin")
    login(demoted, "carol@example.com")
    sid = demoted.cookies.get("sid")
    assert demoted.post("/categories", json={"label": "Bags", "value": "bags"}).status_code == 201

    resp = admin_client.patch(f"/users/{demoted_id}", json={"role": "user"})
    assert resp.status_code == 200

    # The old session is gone, and the token now resolves to the new role
    assert make_client().get("/users/own", headers={"Cookie": f"sid={sid}"}).status_code == 401
    assert demoted.post("/categories", json={"label": "Hats", "value": "hats"}).status_code == 403
    # The admin's own session is untouched
    assert admin_client.get("/users/own").status_code == 200
