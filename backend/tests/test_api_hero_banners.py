from conftest import auth_headers

BANNERS = "/api/v1/hero-banners"


async def _create(client, seller, **form):
    files = {"desktopBanner": ("summer.png", b"desktop-bytes", "image/png")}
    return await client.post(BANNERS, data=form, files=files, headers=auth_headers(seller))


async def test_create_banner(client, seller, image_storage):
    response = await _create(client, seller, order="2")
    assert response.status_code == 201
    banner = response.json()
    assert banner["desktopImageUrl"] == "https://images.test/1/summer.png"
    assert banner["mobileImageUrl"] is None
    assert banner["isActive"] is True
    assert banner["order"] == 2


async def test_banner_requires_an_image(client, seller):
    response = await client.post(BANNERS, data={"isActive": "true"}, headers=auth_headers(seller))
    assert response.status_code == 400


async def test_banner_admin_is_seller_only(client, buyer):
    response = await _create(client, buyer)
    assert response.status_code == 403


async def test_public_listing_shows_active_banners_in_order(client, seller):
    second = (await _create(client, seller, order="2")).json()
    first = (await _create(client, seller, order="1")).json()
    hidden = (await _create(client, seller, order="0", isActive="false")).json()

    public = (await client.get(BANNERS)).json()
    assert [banner["id"] for banner in public] == [first["id"], second["id"]]

    everything = (await client.get(f"{BANNERS}/all", headers=auth_headers(seller))).json()
    assert {banner["id"] for banner in everything} == {first["id"], second["id"], hidden["id"]}


async def test_update_replaces_image_and_hides_banner(client, seller, image_storage):
    banner = (await _create(client, seller)).json()

    response = await client.put(
        f"{BANNERS}/{banner['id']}",
        data={"isActive": "false"},
        files={"mobileBanner": ("phone.jpg", b"mobile-bytes", "image/jpeg")},
        headers=auth_headers(seller),
    )
    assert response.status_code == 200
    assert response.json()["isActive"] is False
    assert response.json()["mobileImageUrl"] == "https://images.test/2/phone.jpg"
    assert response.json()["desktopImageUrl"] == banner["desktopImageUrl"]

    assert (await client.get(BANNERS)).json() == []


async def test_delete_banner_removes_images(client, seller, image_storage):
    banner = (await _create(client, seller)).json()

    response = await client.delete(f"{BANNERS}/{banner['id']}", headers=auth_headers(seller))
    assert response.status_code == 200
    assert image_storage.deleted == [banner["desktopImageUrl"]]

    response = await client.delete(f"{BANNERS}/{banner['id']}", headers=auth_headers(seller))
    assert response.status_code == 404
