async def test_role_claims_and_user_roles(client):
    role = await client.post("/api/roles", json={"name": "Editor", "description": "内容编辑"})
    assert role.status_code == 201
    role_id = role.json()["id"]
    assert role.headers["location"].endswith(f"/api/roles/{role_id}")

    claim = {"claimType": "permission", "claimValue": "products.write"}
    assert (await client.post(f"/api/roles/{role_id}/claims", json=claim)).status_code == 204
    assert (await client.post(f"/api/roles/{role_id}/claims", json=claim)).status_code == 400

    fetched = (await client.get("/api/roles/name/editor")).json()
    assert fetched["claims"] == [claim]

    user = await client.post("/api/users", json={"username": "bob", "firstName": "Bob"})
    assert user.status_code == 201
    user_id = user.json()["id"]

    assert (await client.post(f"/api/users/{user_id}/roles/{role_id}")).status_code == 204
    assert (await client.get(f"/api/users/{user_id}")).json()["roles"] == ["Editor"]

    # 已分配的角色不能删除
    assert (await client.delete(f"/api/roles/{role_id}")).status_code == 400

    assert (await client.delete(f"/api/users/{user_id}/roles/{role_id}")).status_code == 204
    removed = await client.delete(
        f"/api/roles/{role_id}/claims",
        params={"claimType": "permission", "claimValue": "products.write"},
    )
    assert removed.status_code == 204
    assert (await client.delete(f"/api/roles/{role_id}")).status_code == 204


async def test_tag_endpoints(client):
    created = await client.post("/api/tags", json={"name": "Summer Sale", "color": "#ffaa00"})
    assert created.status_code == 201
    tag = created.json()
    assert tag["slug"] == "summer-sale"

    by_slug = await client.get("/api/tags/slug/summer-sale")
    assert by_slug.json()["id"] == tag["id"]

    popular = await client.get("/api/tags/popular", params={"count": 5})
    assert [t["name"] for t in popular.json()] == ["Summer Sale"]

    page = (await client.get("/api/tags")).json()
    assert page["totalCount"] == 1


async def test_category_tree_endpoint(client):
    root = (await client.post("/api/categories", json={"name": "Electronics"})).json()
    await client.post("/api/categories", json={"name": "Phones", "parentCategoryId": root["id"]})

    tree = (await client.get("/api/categories/tree")).json()
    assert tree[0]["name"] == "Electronics"
    assert [c["name"] for c in tree[0]["children"]] == ["Phones"]


async def test_child_category_reports_parent(client):
    root = (await client.post("/api/categories", json={"name": "Electronics"})).json()
    created = await client.post("/api/categories", json={"name": "Phones", "parentCategoryId": root["id"]})
    assert created.status_code == 201
    child = created.json()

    fetched = await client.get(f"/api/categories/{child['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["parentCategoryId"] == root["id"]
    assert fetched.json()["parentCategoryName"] == "Electronics"
    assert fetched.json()["isMainCategory"] is False

    listed = await client.get("/api/categories", params={"parentId": root["id"]})
    assert listed.status_code == 200
    page = listed.json()
    assert page["totalCount"] == 1
    assert page["items"][0]["name"] == "Phones"
    assert page["items"][0]["parentCategoryName"] == "Electronics"


async def test_moving_category_updates_parent_name(client):
    home = (await client.post("/api/categories", json={"name": "Home"})).json()
    garden = (await client.post("/api/categories", json={"name": "Garden"})).json()
    tools = (await client.post("/api/categories", json={"name": "Tools", "parentCategoryId": home["id"]})).json()

    body = {"id": tools["id"], "name": "Tools", "parentCategoryId": garden["id"]}
    moved = await client.put(f"/api/categories/{tools['id']}", json=body)
    assert moved.status_code == 200
    assert moved.json()["parentCategoryName"] == "Garden"

    fetched = (await client.get(f"/api/categories/{tools['id']}")).json()
    assert fetched["parentCategoryId"] == garden["id"]
    assert fetched["parentCategoryName"] == "Garden"


async def test_update_own_profile(client):
    # client 以用户名 admin 登录，本地还没有对应账号
    missing = await client.put("/api/users/me", json={"firstName": "Ada"})
    assert missing.status_code == 404

    await client.post("/api/users", json={"username": "admin", "lastName": "Lovelace", "email": "old@example.com"})

    response = await client.put("/api/users/me", json={"firstName": "Ada"})
    assert response.status_code == 200
    profile = response.json()
    assert profile["fullName"] == "Ada Lovelace"
    assert profile["email"] == "old@example.com"

    invalid = await client.put("/api/users/me", json={"email": "not-an-email"})
    assert invalid.status_code == 400
    assert invalid.json()["details"][0]["identifier"] == "email"
