class TestPublicMenu:
    def test_list_and_filters(self, client, menu):
        r = client.get("/menu/items")
        assert r.status_code == 200
        assert {i["name"] for i in r.json()} == {"The Smoky Texas Stack", "Loaded Fries", "Chocolate Brownie"}

        r = client.get("/menu/items", params={"category": "sides"})
        assert [i["name"] for i in r.json()] == ["Loaded Fries"]

        r = client.get("/menu/items", params={"popular": True})
        assert [i["name"] for i in r.json()] == ["The Smoky Texas Stack"]

        r = client.get("/menu/items", params={"in_stock": False})
        assert [i["name"] for i in r.json()] == ["Chocolate Brownie"]

    def test_detail_has_options(self, client, menu):
        r = client.get(f"/menu/items/{menu['burger']}")
        assert r.status_code == 200
        body = r.json()
        assert [v["id"] for v in body["variants"]] == ["single", "double"]
        assert body["addons"][1] == {"id": "bacon", "name": "Bacon", "price": 2.0}

        r = client.get(f"/menu/items/{menu['fries']}")
        assert r.json()["variants"] == [] and r.json()["addons"] == []

    def test_missing_item(self, client):
        assert client.get("/menu/items/999").status_code == 404

    def test_categories_in_display_order(self, client, menu):
        r = client.get("/categories")
        assert [c["slug"] for c in r.json()] == ["burgers", "sides"]


class TestMenuEditor:
    def test_requires_admin(self, client):
        r = client.post("/menu/items", json={"name": "Soup", "price": 4})
        assert r.status_code in (401, 403)

    def test_create_generates_option_ids(self, client, admin_headers):
        r = client.post("/menu/items", headers=admin_headers, json={
            "name": "Pizza", "price": 11, "category": "pizza",
            "variants": [{"name": "Medium", "price": 11}, {"name": "Large", "price": 14}],
        })
        assert r.status_code == 201, r.text
        variants = r.json()["variants"]
        assert len({v["id"] for v in variants}) == 2

    def test_rejects_negative_price_and_duplicate_ids(self, client, admin_headers):
        r = client.post("/menu/items", headers=admin_headers, json={"name": "Bad", "price": -1})
        assert r.status_code == 422
        r = client.post("/menu/items", headers=admin_headers, json={
            "name": "Dup", "price": 5,
            "addons": [{"id": "x", "name": "A", "price": 1}, {"id": "x", "name": "B", "price": 1}],
        })
        assert r.status_code == 422

    def test_patch_put_and_delete(self, client, admin_headers, menu):
        fries = menu["fries"]
        r = client.patch(f"/menu/items/{fries}", headers=admin_headers, json={"price": 7.25})
        assert r.json()["price"] == 7.25
        assert r.json()["name"] == "Loaded Fries"

        r = client.put(f"/menu/items/{fries}", headers=admin_headers,
                       json={"name": "Curly Fries", "price": 5})
        assert r.json()["name"] == "Curly Fries"
        assert r.json()["category"] is None

        assert client.delete(f"/menu/items/{fries}", headers=admin_headers).status_code == 200
        assert client.get(f"/menu/items/{fries}").status_code == 404

    def test_stock_toggle(self, client, admin_headers, menu):
        r = client.patch(f"/menu/items/{menu['brownie']}/stock", headers=admin_headers,
                         json={"in_stock": True})
        assert r.status_code == 200
        assert r.json()["in_stock"] is True

    def test_stock_toggle_unknown_item(self, client, admin_headers):
        r = client.patch("/menu/items/999/stock", headers=admin_headers, json={"in_stock": False})
        assert r.status_code == 404

    def test_upload_image(self, client, admin_headers):
        files = {"file": ("burger.png", b"\x89PNG\r\n\x1a\nfake", "image/png")}
        r = client.post("/uploads/images", headers=admin_headers, files=files)
        assert r.status_code == 201, r.text
        url = r.json()["url"]
        assert "/uploads/" in url and url.endswith(".png")

        path = url[url.index("/uploads/"):]
        assert client.get(path).content.startswith(b"\x89PNG")

    def test_upload_rejects_non_images(self, client, admin_headers):
        files = {"file": ("notes.txt", b"hello", "text/plain")}
        assert client.post("/uploads/images", headers=admin_headers, files=files).status_code == 400


class TestCategoryEditor:
    def test_crud(self, client, admin_headers):
        r = client.post("/categories", headers=admin_headers,
                        json={"name": "Drinks", "slug": "drinks", "display_order": 3})
        assert r.status_code == 201
        cid = r.json()["id"]

        r = client.post("/categories", headers=admin_headers, json={"name": "Again", "slug": "drinks"})
        assert r.status_code == 409

        r = client.patch(f"/categories/{cid}", headers=admin_headers, json={"display_order": 0})
        assert r.json()["display_order"] == 0

        assert client.delete(f"/categories/{cid}", headers=admin_headers).status_code == 200
        assert client.get("/categories").json() == []

    def test_slug_format(self, client, admin_headers):
        r = client.post("/categories", headers=admin_headers, json={"name": "Bad", "slug": "Bad Slug"})
        assert r.status_code == 422
