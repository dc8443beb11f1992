# =============================================================================
# tests/test_content.py - Site Content & Contact Form Tests
# =============================================================================

from unittest.mock import patch

from core.models.content import ContactRequest
from core.services.content_service import ContentService
from tests.conftest import TEST_USER_ID

CONTACT_FORM = {
    "name": "Jane",
    "email": "jane@example.com",
    "subject": "Billing",
    "message": "I was charged twice",
}


class TestContentService:
    """Test static content getters."""

    def test_remedies_sections(self):
        remedies = ContentService.get_remedies()

        assert remedies.title == "Your Skincare Remedies"
        assert [c.category for c in remedies.categories] == [
            "Morning Routine", "Evening Routine", "Hydration Tips", "Lifestyle Habits",
        ]
        assert len(remedies.ingredients) == 4
        assert remedies.foods[0].name == "Avocados"

    def test_remedies_are_copies(self):
        ContentService.get_remedies().categories[0].tips.clear()

        assert len(ContentService.get_remedies().categories[0].tips) == 4

    def test_upload_tips(self):
        titles = [t.title for t in ContentService.get_upload_tips()]

        assert titles == ["Good Lighting", "Clear Photo", "Face Forward"]


class TestSubmitContact:
    """Test ContentService.submit_contact."""

    @patch("core.services.content_service.SupabaseClient")
    def test_anonymous_message(self, mock_supabase):
        response = ContentService.submit_contact(ContactRequest(**CONTACT_FORM))

        assert response.success is True
        assert response.title == "Message sent!"
        mock_supabase.insert_contact_message.assert_called_once_with(CONTACT_FORM)

    @patch("core.services.content_service.SupabaseClient")
    def test_signed_in_message_linked(self, mock_supabase):
        ContentService.submit_contact(ContactRequest(**CONTACT_FORM), user_id="user-1")

        data = mock_supabase.insert_contact_message.call_args[0][0]
        assert data["user_id"] == "user-1"


class TestContentRoutes:
    """Test public content endpoints."""

    def test_remedies(self, anon_client):
        response = anon_client.get("/api/v1/content/remedies")

        assert response.status_code == 200
        assert len(response.json()["categories"]) == 4

    def test_upload_tips(self, anon_client):
        response = anon_client.get("/api/v1/content/upload-tips")

        assert response.status_code == 200
        assert response.json()[0]["description"] == "Natural light works best"

    def test_contact_info(self, anon_client):
        response = anon_client.get("/api/v1/contact")

        assert response.status_code == 200
        assert response.json()["email"] == "hello@skinsense.ai"

    @patch("core.services.content_service.SupabaseClient")
    def test_contact_anonymous(self, mock_supabase, anon_client):
        response = anon_client.post("/api/v1/contact", json=CONTACT_FORM)

        assert response.status_code == 200
        assert "user_id" not in mock_supabase.insert_contact_message.call_args[0][0]

    @patch("core.services.content_service.SupabaseClient")
    def test_contact_signed_in(self, mock_supabase, anon_client):
        """Test a valid bearer token links the message to the sender."""
        from jose import jwt

        token = jwt.encode(
            {"sub": str(TEST_USER_ID), "aud": "authenticated", "email": "jane@example.com"},
            "test-jwt-secret",
            algorithm="HS256",
        )

        response = anon_client.post(
            "/api/v1/contact",
            json=CONTACT_FORM,
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 200
        data = mock_supabase.insert_contact_message.call_args[0][0]
        assert data["user_id"] == str(TEST_USER_ID)

    @patch("core.services.content_service.SupabaseClient")
    def test_contact_bad_token_is_anonymous(self, mock_supabase, anon_client):
        response = anon_client.post(
            "/api/v1/contact",
            json=CONTACT_FORM,
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 200
        assert "user_id" not in mock_supabase.insert_contact_message.call_args[0][0]

    def test_contact_blank_message(self, anon_client):
        response = anon_client.post("/api/v1/contact", json={**CONTACT_FORM, "message": "  "})

        assert response.status_code == 422
