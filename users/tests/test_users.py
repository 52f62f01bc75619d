from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

User = get_user_model()


class UserMeAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.member = User.objects.create_user(
            username="member",
            email="member@example.com",
            password="memberpass",
            club_role="Core Team",
        )
        self.other = User.objects.create_user(username="other", password="otherpass")

    def test_me_returns_profile_and_gems(self):
        User.objects.filter(pk=self.member.pk).update(gems=25)
        self.client.force_authenticate(user=self.member)

        response = self.client.get("/api/users/me/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["username"], "member")
        self.assertEqual(response.data["role"], User.ROLE_MEMBER)
        self.assertEqual(response.data["club_role"], "Core Team")
        self.assertEqual(response.data["gems"], 25)

    def test_me_requires_login(self):
        response = self.client.get("/api/users/me/")
        self.assertEqual(response.status_code, 401)

    def test_cannot_read_other_members(self):
        self.client.force_authenticate(user=self.member)
        response = self.client.get(f"/api/users/{self.other.pk}/")
        self.assertEqual(response.status_code, 404)

    def test_gems_are_read_only(self):
        self.client.force_authenticate(user=self.member)
        response = self.client.patch("/api/users/me/", {"gems": 1000}, format="json")

        self.assertEqual(response.status_code, 405)
        self.member.refresh_from_db()
        self.assertEqual(self.member.gems, 0)

    def test_jwt_login(self):
        response = self.client.post(
            "/api/users/token/",
            {"username": "member", "password": "memberpass"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        response = self.client.get("/api/users/me/")
        self.assertEqual(response.status_code, 200)
