"""
Unit tests for room management endpoints.
"""
import pytest


def get_auth_header(token: str) -> dict:
    """Helper function to create authorization header."""
    return {"Authorization": f"Bearer {token}"}


NEW_ROOM = {
    "name": "Executive Suite",
    "price": 688,
    "stock": 5,
    "description": "60 square metres with lounge access",
    "facilities": ["air conditioning", "tv", "wifi", "bathtub"],
}


class TestRoomCreation:
    """Tests for room creation endpoint."""

    def test_owner_adds_room_to_approved_hotel(self, client, approved_hotel, owner_token):
        """Test the owner can add a room to an approved hotel."""
        response = client.post(
            f"/hotels/{approved_hotel.id}/rooms",
            headers=get_auth_header(owner_token),
            json=NEW_ROOM,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["hotel_id"] == approved_hotel.id
        assert data["status"] == "ON"
        assert data["facilities"] == ["air conditioning", "tv", "wifi", "bathtub"]

    def test_admin_adds_room(self, client, approved_hotel, admin_token):
        """Test admin can add a room to any hotel."""
        response = client.post(
            f"/hotels/{approved_hotel.id}/rooms",
            headers=get_auth_header(admin_token),
            json=NEW_ROOM,
        )
        assert response.status_code == 201

    def test_other_user_denied(self, client, approved_hotel, other_token):
        """Test a non-owner cannot add rooms."""
        response = client.post(
            f"/hotels/{approved_hotel.id}/rooms",
            headers=get_auth_header(other_token),
            json=NEW_ROOM,
        )
        assert response.status_code == 403

    @pytest.mark.parametrize("fixture_name", ["draft_hotel", "pending_hotel"])
    def test_unapproved_hotel_rejected(self, client, request, owner_token, fixture_name):
        """Test rooms cannot be added before the hotel is approved."""
        hotel = request.getfixturevalue(fixture_name)
        response = client.post(
            f"/hotels/{hotel.id}/rooms",
            headers=get_auth_header(owner_token),
            json=NEW_ROOM,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "hotel_not_approved"
        listing = client.get(f"/hotels/{hotel.id}/rooms", headers=get_auth_header(owner_token))
        assert listing.status_code == 200
        assert listing.json() == []

    def test_unknown_hotel(self, client, owner_token):
        """Test adding a room to a missing hotel answers 404."""
        response = client.post("/hotels/9999/rooms", headers=get_auth_header(owner_token), json=NEW_ROOM)
        assert response.status_code == 404

    def test_negative_stock_rejected(self, client, approved_hotel, owner_token):
        """Test negative stock is rejected."""
        response = client.post(
            f"/hotels/{approved_hotel.id}/rooms",
            headers=get_auth_header(owner_token),
            json={**NEW_ROOM, "stock": -1},
        )
        assert response.status_code == 422


class TestRoomListing:
    """Tests for the public room listing of a hotel."""

    def test_only_on_rooms_by_price(self, client, approved_hotel, sample_rooms):
        """Test only ON rooms are listed, cheapest first."""
        response = client.get(f"/hotels/{approved_hotel.id}/rooms")
        assert response.status_code == 200
        rooms = response.json()
        assert [room["name"] for room in rooms] == ["Standard Queen", "Deluxe King", "Deluxe Twin"]
        assert all(room["status"] == "ON" for room in rooms)
        prices = [room["price"] for room in rooms]
        assert prices == sorted(prices)

    def test_switched_off_room_disappears(self, client, approved_hotel, sample_rooms, owner_token):
        """Test a room switched OFF leaves the listing."""
        client.patch(
            f"/rooms/{sample_rooms[0].id}",
            headers=get_auth_header(owner_token),
            json={"status": "OFF"},
        )
        rooms = client.get(f"/hotels/{approved_hotel.id}/rooms").json()
        assert sample_rooms[0].id not in [room["id"] for room in rooms]

    def test_offline_hotel_rooms_hidden(self, client, approved_hotel, sample_rooms, owner_token, other_token):
        """Test an OFFLINE hotel's rooms are hidden exactly like the hotel itself."""
        client.post(f"/hotels/{approved_hotel.id}/offline", headers=get_auth_header(owner_token))
        assert client.get(f"/hotels/{approved_hotel.id}").status_code == 404
        assert client.get(f"/rooms/{sample_rooms[0].id}").status_code == 404

        anonymous = client.get(f"/hotels/{approved_hotel.id}/rooms")
        assert anonymous.status_code == 404
        assert anonymous.json()["error"] == "not_found"
        other = client.get(f"/hotels/{approved_hotel.id}/rooms", headers=get_auth_header(other_token))
        assert other.status_code == 404

        owner = client.get(f"/hotels/{approved_hotel.id}/rooms", headers=get_auth_header(owner_token))
        assert owner.status_code == 200
        assert len(owner.json()) == 3

    def test_admin_sees_rooms_of_pending_hotel(self, client, pending_hotel, admin_token):
        """Test admins can list the rooms of a hotel under review."""
        response = client.get(f"/hotels/{pending_hotel.id}/rooms", headers=get_auth_header(admin_token))
        assert response.status_code == 200
        assert response.json() == []

    def test_unknown_hotel(self, client):
        """Test listing the rooms of a missing hotel answers 404."""
        response = client.get("/hotels/9999/rooms")
        assert response.status_code == 404


class TestRoomDetail:
    """Tests for the single room endpoint."""

    def test_get_room(self, client, sample_rooms):
        """Test getting a room by ID."""
        response = client.get(f"/rooms/{sample_rooms[0].id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Deluxe King"

    def test_get_room_not_found(self, client):
        """Test getting a non-existent room."""
        response = client.get("/rooms/9999")
        assert response.status_code == 404


class TestRoomUpdate:
    """Tests for room update endpoint."""

    def test_owner_updates_price(self, client, sample_rooms, owner_token):
        """Test the owner can patch a single field."""
        room = sample_rooms[0]
        response = client.patch(
            f"/rooms/{room.id}", headers=get_auth_header(owner_token), json={"price": 399}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["price"] == 399
        assert data["stock"] == 10
        assert data["name"] == "Deluxe King"

    def test_other_user_denied(self, client, sample_rooms, other_token):
        """Test a non-owner cannot update a room."""
        response = client.patch(
            f"/rooms/{sample_rooms[0].id}", headers=get_auth_header(other_token), json={"price": 1}
        )
        assert response.status_code == 403

    def test_admin_updates(self, client, sample_rooms, admin_token):
        """Test admin can update any room."""
        response = client.patch(
            f"/rooms/{sample_rooms[0].id}",
            headers=get_auth_header(admin_token),
            json={"description": "Renovated"},
        )
        assert response.status_code == 200
        assert response.json()["description"] == "Renovated"

    def test_invalid_status_rejected(self, client, sample_rooms, owner_token):
        """Test an unknown room status is rejected."""
        response = client.patch(
            f"/rooms/{sample_rooms[0].id}", headers=get_auth_header(owner_token), json={"status": "MAYBE"}
        )
        assert response.status_code == 422


class TestRoomDeletion:
    """Tests for room deletion endpoint."""

    def test_owner_deletes_room(self, client, sample_rooms, owner_token):
        """Test the owner can delete a room."""
        response = client.delete(f"/rooms/{sample_rooms[0].id}", headers=get_auth_header(owner_token))
        assert response.status_code == 200
        assert client.get(f"/rooms/{sample_rooms[0].id}").status_code == 404

    def test_other_user_cannot_delete(self, client, sample_rooms, other_token):
        """Test a non-owner cannot delete a room."""
        response = client.delete(f"/rooms/{sample_rooms[0].id}", headers=get_auth_header(other_token))
        assert response.status_code == 403


class TestStockAdjustment:
    """Tests for the admin-only stock endpoint."""

    def test_admin_decrements_stock(self, client, sample_rooms, admin_token):
        """Test admin can take stock away."""
        room = sample_rooms[3]  # stock 5
        response = client.patch(
            f"/rooms/{room.id}/stock", headers=get_auth_header(admin_token), json={"quantity": -3}
        )
        assert response.status_code == 200
        assert response.json() == {"room_id": room.id, "stock": 2}

    def test_insufficient_stock(self, client, sample_rooms, admin_token):
        """Test stock never goes below zero."""
        room = sample_rooms[3]
        response = client.patch(
            f"/rooms/{room.id}/stock", headers=get_auth_header(admin_token), json={"quantity": -10}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "insufficient_stock"
        assert client.get(f"/rooms/{room.id}").json()["stock"] == 5

    def test_owner_cannot_adjust_stock(self, client, sample_rooms, owner_token):
        """Test only admins can adjust stock."""
        response = client.patch(
            f"/rooms/{sample_rooms[3].id}/stock", headers=get_auth_header(owner_token), json={"quantity": 1}
        )
        assert response.status_code == 403

    def test_quantity_must_be_integer(self, client, sample_rooms, admin_token):
        """Test a non-integer quantity is rejected."""
        response = client.patch(
            f"/rooms/{sample_rooms[3].id}/stock", headers=get_auth_header(admin_token), json={"quantity": "lots"}
        )
        assert response.status_code == 422

    def test_unknown_room(self, client, admin_token):
        """Test adjusting stock of a missing room answers 404."""
        response = client.patch("/rooms/9999/stock", headers=get_auth_header(admin_token), json={"quantity": 1})
        assert response.status_code == 404
