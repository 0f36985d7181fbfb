import httpx
import pytest
from jose import jwt

from app.core.config import settings
from app.core.deps import get_identity_provider
from app.main import app
from app.services.identity_provider import KeycloakClient

TOKEN_BODY = {
    "access_token": "access-123",
    "expires_in": 300,
    "refresh_expires_in": 1800,
    "refresh_token": "refresh-456",
    "token_type": "Bearer",
    "not-before-policy": 0,
    "session_state": "abc",
    "scope": "openid profile",
}


def use_identity_provider(handler):
    """用 MockTransport 替换身份服务，返回记录下来的请求列表"""
    calls = []

    def recording(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    idp = KeycloakClient(
        token_endpoint="http://kc/token",
        logout_endpoint="http://kc/logout",
        client_id="catalog-api",
        client_secret="s3cret",
        transport=httpx.MockTransport(recording),
    )
    app.dependency_overrides[get_identity_provider] = lambda: idp
    return calls


def make_token(roles, sub="user-1", username="alice"):
    claims = {
        "sub": sub,
        "preferred_username": username,
        "email": f"{username}@example.com",
        "realm_access": {"roles": roles},
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def form_of(request: httpx.Request):
    return dict(httpx.QueryParams(request.content.decode()))


class TestLogin:

    async def test_login_passes_token_through(self, anon_client):
        calls = use_identity_provider(lambda request: httpx.Response(200, json=TOKEN_BODY))

        response = await anon_client.post("/api/auth/login", json={"username": "alice", "password": "pw"})

        assert response.status_code == 200
        body = response.json()
        assert body["access_token"] == "access-123"
        assert body["refresh_token"] == "refresh-456"
        assert body["not-before-policy"] == 0

        form = form_of(calls[0])
        assert str(calls[0].url) == "http://kc/token"
        assert form["grant_type"] == "password"
        assert form["username"] == "alice"
        assert form["client_id"] == "catalog-api"
        assert form["client_secret"] == "s3cret"

    async def test_rejected_credentials_are_401(self, anon_client):
        use_identity_provider(lambda request: httpx.Response(401, json={"error": "invalid_grant"}))

        response = await anon_client.post("/api/auth/login", json={"username": "alice", "password": "bad"})

        assert response.status_code == 401
        assert response.json()["statusCode"] == 401

    async def test_unreachable_identity_provider_is_500(self, anon_client):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        use_identity_provider(fail)

        response = await anon_client.post("/api/auth/login", json={"username": "alice", "password": "pw"})
        assert response.status_code == 500
        assert response.json()["statusCode"] == 500

    async def test_missing_fields_are_400(self, anon_client):
        use_identity_provider(lambda request: httpx.Response(200, json=TOKEN_BODY))
        response = await anon_client.post("/api/auth/login", json={"username": "alice"})
        assert response.status_code == 400


class TestRefreshAndLogout:

    async def test_refresh_token(self, anon_client):
        calls = use_identity_provider(lambda request: httpx.Response(200, json=TOKEN_BODY))

        response = await anon_client.post("/api/auth/refresh-token", json={"refreshToken": "refresh-456"})

        assert response.status_code == 200
        form = form_of(calls[0])
        assert form["grant_type"] == "refresh_token"
        assert form["refresh_token"] == "refresh-456"

    async def test_expired_refresh_token_is_401(self, anon_client):
        use_identity_provider(lambda request: httpx.Response(400, json={"error": "invalid_grant"}))
        response = await anon_client.post("/api/auth/refresh-token", json={"refreshToken": "old"})
        assert response.status_code == 401

    async def test_logout_ignores_upstream_failure(self, client):
        calls = use_identity_provider(lambda request: httpx.Response(400))

        response = await client.post("/api/auth/logout", json={"refreshToken": "refresh-456"})

        assert response.status_code == 200
        assert str(calls[0].url) == "http://kc/logout"
        assert form_of(calls[0])["refresh_token"] == "refresh-456"

    async def test_logout_requires_token(self, anon_client):
        use_identity_provider(lambda request: httpx.Response(204))
        response = await anon_client.post("/api/auth/logout")
        assert response.status_code == 401


class TestBearerTokens:

    async def test_protected_route_without_token_is_401(self, anon_client):
        response = await anon_client.get("/api/products")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["statusCode"] == 401

    async def test_garbage_token_is_401(self, anon_client):
        response = await anon_client.get("/api/products", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    async def test_token_signed_with_other_key_is_401(self, anon_client):
        token = jwt.encode({"sub": "x"}, "another-key", algorithm="HS256")
        response = await anon_client.get("/api/products", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_me_returns_token_claims(self, anon_client):
        token = make_token(["admin", "viewer"])
        response = await anon_client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json() == {
            "id": "user-1",
            "username": "alice",
            "email": "alice@example.com",
            "roles": ["admin", "viewer"],
            "isAdmin": True,
        }

    async def test_valid_token_reads_catalog(self, anon_client):
        token = make_token(["viewer"])
        response = await anon_client.get("/api/products", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["totalCount"] == 0

    @pytest.mark.parametrize("method,path,body", [
        ("post", "/api/categories", {"name": "Tools"}),
        ("post", "/api/tags", {"name": "Sale"}),
        ("post", "/api/roles", {"name": "Manager"}),
        ("get", "/api/users", None),
    ])
    async def test_admin_routes_forbid_other_roles(self, anon_client, method, path, body):
        token = make_token(["viewer"])
        kwargs = {"headers": {"Authorization": f"Bearer {token}"}}
        if body is not None:
            kwargs["json"] = body
        response = await getattr(anon_client, method)(path, **kwargs)
        assert response.status_code == 403

    async def test_admin_token_can_write(self, anon_client):
        token = make_token(["admin"])
        response = await anon_client.post(
            "/api/categories", json={"name": "Tools"}, headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 201
        assert response.json()["slug"] == "tools"

    async def test_any_user_can_update_own_profile(self, anon_client):
        admin = {"Authorization": f"Bearer {make_token(['admin'], sub='admin-1', username='admin')}"}
        await anon_client.post("/api/users", json={"username": "alice"}, headers=admin)

        viewer = {"Authorization": f"Bearer {make_token(['viewer'])}"}
        response = await anon_client.put("/api/users/me", json={"firstName": "Alice"}, headers=viewer)

        assert response.status_code == 200
        assert response.json()["username"] == "alice"
        assert response.json()["firstName"] == "Alice"

    async def test_profile_update_requires_token(self, anon_client):
        response = await anon_client.put("/api/users/me", json={"firstName": "Alice"})
        assert response.status_code == 401
