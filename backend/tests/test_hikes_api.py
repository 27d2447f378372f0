def schedule(client, group_id, member, **overrides):
    payload = {
        "title": "Bear Mountain loop",
        "start_at": "2030-06-15T09:00:00",
        "location": "North lot",
        "distance_miles": 6.456,
        "difficulty": "moderate_plus",
        **overrides,
    }
    r = client.post(f"/groups/{group_id}/hikes", json=payload, headers=member.headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_schedule_and_list_hikes(client, new_group):
    group, owner = new_group()
    later = schedule(client, group["id"], owner, title="Later hike", start_at="2030-07-01T08:30:00")
    hike = schedule(client, group["id"], owner)

    assert hike["title"] == "Bear Mountain loop"
    assert hike["distance_miles"] == 6.46
    assert hike["difficulty_label"] == "Moderate +"
    assert hike["created_by_name"] == "Owner"
    assert hike["day_label"] == "Saturday, June 15"
    assert hike["when_display"] == "Sat, Jun 15, 9:00 AM"
    assert hike["going_count"] == 0
    assert hike["my_status"] is None

    listed = client.get(f"/groups/{group['id']}/hikes", headers=owner.headers).json()
    assert [h["event_id"] for h in listed] == [hike["event_id"], later["event_id"]]


def test_hike_validation(client, new_group):
    group, owner = new_group()
    base = {"title": "x", "start_at": "2030-06-15T09:00:00"}
    r = client.post(f"/groups/{group['id']}/hikes", json={**base, "title": "  "}, headers=owner.headers)
    assert r.status_code == 422
    r = client.post(f"/groups/{group['id']}/hikes", json={**base, "distance_miles": 0}, headers=owner.headers)
    assert r.status_code == 422
    r = client.post(f"/groups/{group['id']}/hikes", json={**base, "difficulty": "extreme"}, headers=owner.headers)
    assert r.status_code == 422

    hike = schedule(client, group["id"], owner, distance_miles=None, location="  ")
    assert hike["distance_miles"] is None
    assert hike["location"] is None
    assert hike["difficulty"] == "moderate_plus"


def test_rsvp_upsert_and_tallies(client, new_group, new_member):
    group, owner = new_group()
    friend = new_member("Friend")
    client.post("/groups/join", json={"code": group["join_code"]}, headers=friend.headers)
    hike = schedule(client, group["id"], owner)

    r = client.put(f"/hikes/{hike['event_id']}/rsvp", json={"status": "maybe"}, headers=friend.headers)
    assert r.status_code == 200, r.text
    assert r.json()["maybe_count"] == 1
    assert r.json()["my_status"] == "maybe"

    r = client.put(f"/hikes/{hike['event_id']}/rsvp", json={"status": "going"}, headers=friend.headers)
    assert (r.json()["going_count"], r.json()["maybe_count"]) == (1, 0)

    r = client.put(f"/hikes/{hike['event_id']}/rsvp", json={"status": "no"}, headers=owner.headers)
    body = r.json()
    assert (body["going_count"], body["maybe_count"], body["no_count"]) == (1, 0, 1)
    assert body["my_status"] == "no"

    r = client.put(f"/hikes/{hike['event_id']}/rsvp", json={"status": "sure"}, headers=owner.headers)
    assert r.status_code == 422


def test_only_members_see_hikes(client, new_group, new_member):
    group, owner = new_group()
    hike = schedule(client, group["id"], owner)
    outsider = new_member("Outsider")
    assert client.get(f"/groups/{group['id']}/hikes", headers=outsider.headers).status_code == 404
    r = client.put(f"/hikes/{hike['event_id']}/rsvp", json={"status": "going"}, headers=outsider.headers)
    assert r.status_code == 404


def test_edit_and_delete_permissions(client, new_group, new_member):
    group, owner = new_group()
    friend = new_member("Friend")
    client.post("/groups/join", json={"code": group["join_code"]}, headers=friend.headers)

    hike = schedule(client, group["id"], friend)

    # group owner may edit a member's hike
    r = client.put(f"/hikes/{hike['event_id']}", json={"title": "Renamed", "difficulty": "hard"}, headers=owner.headers)
    assert r.status_code == 200, r.text
    assert r.json()["title"] == "Renamed"
    assert r.json()["difficulty_label"] == "Hard"

    third = new_member("Third")
    client.post("/groups/join", json={"code": group["join_code"]}, headers=third.headers)
    assert client.put(f"/hikes/{hike['event_id']}", json={"title": "Mine now"}, headers=third.headers).status_code == 403
    assert client.delete(f"/hikes/{hike['event_id']}", headers=third.headers).status_code == 403

    r = client.put(f"/hikes/{hike['event_id']}", json={"title": ""}, headers=friend.headers)
    assert r.status_code == 422

    client.put(f"/hikes/{hike['event_id']}/rsvp", json={"status": "going"}, headers=third.headers)
    assert client.delete(f"/hikes/{hike['event_id']}", headers=friend.headers).status_code == 204
    assert client.get(f"/groups/{group['id']}/hikes", headers=owner.headers).json() == []
