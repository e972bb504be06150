from tests.conftest import register


def test_missing_tenant_header_is_rejected(client, acme):
    headers = {"Authorization": acme["Authorization"]}
    r = client.get("/api/categories", headers=headers)
    assert r.status_code == 400
    assert r.json() == {"message": "Tenant ID is required"}


def test_blank_tenant_header_counts_as_missing(client, acme):
    r = client.get("/api/categories", headers={**acme, "x-tenant-id": "   "})
    assert r.status_code == 400
    assert r.json() == {"message": "Tenant ID is required"}


def test_tenant_header_is_trimmed(client, acme):
    r = client.get("/api/categories", headers={**acme, "x-tenant-id": f" {acme['x-tenant-id']} "})
    assert r.status_code == 200


def test_non_numeric_tenant_header_is_rejected(client, acme):
    r = client.get("/api/categories", headers={**acme, "x-tenant-id": "acme"})
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid tenant ID"}


def test_unknown_tenant_is_not_found(client, acme):
    r = client.get("/api/categories", headers={**acme, "x-tenant-id": "9999"})
    assert r.status_code == 404
    assert r.json() == {"message": "Tenant not found"}


def test_missing_bearer_token_is_unauthorized(client, acme):
    r = client.get("/api/categories", headers={"x-tenant-id": acme["x-tenant-id"]})
    assert r.status_code == 401


def test_invalid_bearer_token_is_unauthorized(client, acme):
    r = client.get("/api/categories", headers={**acme, "Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json() == {"message": "Invalid token"}


def test_token_from_other_tenant_is_rejected(client, acme):
    r, beta = register(client, name="Beta", email="b@beta.com")
    assert r.status_code == 201

    crossed = {"Authorization": acme["Authorization"], "x-tenant-id": beta["x-tenant-id"]}
    r = client.get("/api/categories", headers=crossed)
    assert r.status_code == 401


def test_tenant_info_uses_resolved_schema(client, acme):
    r = client.get("/api/tenant", headers=acme)
    assert r.status_code == 200
    data = r.json()
    assert data["id"] == int(acme["x-tenant-id"])
    assert data["name"] == "Acme"
    assert data["schema_name"] == "tenant_acme"
    assert data["plan"] == "basic"


def test_public_routes_do_not_need_tenant(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/").status_code == 200
