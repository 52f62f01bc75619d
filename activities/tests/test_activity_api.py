from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from activities.models import Activity, CheckIn
from rewards.models import GemTransaction

User = get_user_model()


class ActivityAPITestCase(TestCase):
    def setUp(self):
        # Throttle counters live in the default cache
        cache.clear()

        self.client = APIClient()

        self.admin = User.objects.create_user(
            username="admin",
            email="admin@example.com",
            password="adminpass",
            role=User.ROLE_ADMIN,
        )
        self.member = User.objects.create_user(
            username="member",
            email="member@example.com",
            password="memberpass",
            club_role="Core Team",
        )
        self.other_member = User.objects.create_user(
            username="other",
            email="other@example.com",
            password="otherpass",
        )

        self.list_url = reverse("activity-list-create")

    def _create_activity(self, **overrides):
        payload = {
            "title": "Intro to AI",
            "type": "workshop",
            "starts_at": "2025-03-01T09:00:00Z",
            "gem_amount": 10,
            "requires_evidence": False,
        }
        payload.update(overrides)

        self.client.force_authenticate(user=self.admin)
        response = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(
            response.status_code,
            201,
            f"Status: {response.status_code}, Content: {getattr(response, 'data', response.content)}",
        )
        return response.data

    def _check_in(self, user, activity_id, **body):
        self.client.force_authenticate(user=user)
        return self.client.post(
            reverse("activity-check-in", args=[activity_id]),
            body,
            format="json",
        )

    def _review(self, check_in_id, decision):
        self.client.force_authenticate(user=self.admin)
        return self.client.post(
            reverse("check-in-review", args=[check_in_id]),
            {"decision": decision},
            format="json",
        )

    # ---- activities -----------------------------------------------

    def test_admin_creates_activity_with_defaults(self):
        data = self._create_activity()

        self.assertEqual(data["status"], Activity.STATUS_UPCOMING)
        self.assertEqual(data["allowed_transitions"], [Activity.STATUS_ONGOING, Activity.STATUS_CANCELLED])
        self.assertTrue(data["checkin_enabled"])
        self.assertEqual(data["gem_amount"], 10)
        self.assertIsNone(data["ends_at"])
        self.assertTrue(Activity.objects.filter(pk=data["id"]).exists())

    def test_member_cannot_create_activity(self):
        self.client.force_authenticate(user=self.member)
        response = self.client.post(
            self.list_url,
            {"title": "Nope", "type": "talk", "starts_at": "2025-03-01T09:00:00Z"},
            format="json",
        )
        self.assertEqual(response.status_code, 403)
        self.assertFalse(Activity.objects.exists())

    def test_create_missing_required_fields(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(self.list_url, {"title": "Only a title"}, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["code"], "validation_error")
        self.assertEqual(response.data["errors"]["detail"], "title, type, and starts_at are required")

    def test_list_is_public_and_newest_first(self):
        older = self._create_activity(title="Older", starts_at="2025-01-01T09:00:00Z")
        newer = self._create_activity(title="Newer", starts_at="2025-06-01T09:00:00Z")

        self.client.force_authenticate(user=None)
        response = self.client.get(self.list_url, {"limit": 1})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 2)
        self.assertEqual(response.data["limit"], 1)
        self.assertEqual([a["id"] for a in response.data["results"]], [newer["id"]])

        response = self.client.get(self.list_url, {"limit": 1, "offset": 1})
        self.assertEqual([a["id"] for a in response.data["results"]], [older["id"]])

    def test_list_rejects_bad_pagination(self):
        response = self.client.get(self.list_url, {"limit": "abc"})
        self.assertEqual(response.status_code, 400)

    def test_get_unknown_activity(self):
        response = self.client.get(reverse("activity-detail", args=[999999]))

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["code"], "not_found")

    def test_partial_update(self):
        activity = self._create_activity(location="Hall A")

        response = self.client.patch(
            reverse("activity-detail", args=[activity["id"]]),
            {"gem_amount": 20, "location": None},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["gem_amount"], 20)
        self.assertIsNone(response.data["location"])
        self.assertEqual(response.data["title"], "Intro to AI")

    def test_form_encoded_patch_leaves_absent_fields_alone(self):
        activity = self._create_activity(location="Hall A")

        response = self.client.patch(
            reverse("activity-detail", args=[activity["id"]]),
            {"title": "Renamed"},
            format="multipart",
        )

        self.assertEqual(
            response.status_code,
            200,
            f"Status: {response.status_code}, Content: {getattr(response, 'data', response.content)}",
        )
        stored = Activity.objects.get(pk=activity["id"])
        self.assertEqual(stored.title, "Renamed")
        self.assertEqual(stored.location, "Hall A")
        self.assertEqual(stored.gem_amount, 10)
        self.assertTrue(stored.checkin_enabled)
        self.assertFalse(stored.requires_evidence)

    def test_form_encoded_create_applies_defaults(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.list_url,
            {"title": "Hack Night", "type": "hackathon", "starts_at": "2025-04-01T18:00:00Z"},
            format="multipart",
        )

        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data["checkin_enabled"])
        self.assertFalse(response.data["requires_evidence"])
        self.assertEqual(response.data["gem_amount"], 0)
        self.assertEqual(response.data["status"], Activity.STATUS_UPCOMING)

    def test_over_long_title_is_rejected(self):
        activity = self._create_activity()

        response = self.client.patch(
            reverse("activity-detail", args=[activity["id"]]),
            {"title": "x" * 256},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("title", response.data["errors"])
        self.assertEqual(Activity.objects.get(pk=activity["id"]).title, "Intro to AI")

    def test_allowed_transitions_follow_status(self):
        activity = self._create_activity()

        response = self.client.patch(
            reverse("activity-detail", args=[activity["id"]]),
            {"status": Activity.STATUS_ONGOING},
            format="json",
        )
        self.assertEqual(
            response.data["allowed_transitions"],
            [Activity.STATUS_COMPLETED, Activity.STATUS_CANCELLED],
        )

        response = self.client.patch(
            reverse("activity-detail", args=[activity["id"]]),
            {"status": Activity.STATUS_COMPLETED},
            format="json",
        )
        self.assertEqual(response.data["allowed_transitions"], [])

    def test_empty_patch_leaves_record_unchanged(self):
        activity = self._create_activity()
        before = Activity.objects.get(pk=activity["id"])

        response = self.client.patch(
            reverse("activity-detail", args=[activity["id"]]),
            {},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["errors"]["detail"], "No fields to update")
        after = Activity.objects.get(pk=activity["id"])
        self.assertEqual(after.updated_at, before.updated_at)
        self.assertEqual(after.title, before.title)

    def test_invalid_status_transition(self):
        activity = self._create_activity()

        response = self.client.patch(
            reverse("activity-detail", args=[activity["id"]]),
            {"status": Activity.STATUS_COMPLETED},
            format="json",
        )

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "invalid_transition")
        self.assertEqual(Activity.objects.get(pk=activity["id"]).status, Activity.STATUS_UPCOMING)

    def test_delete_activity(self):
        activity = self._create_activity()

        response = self.client.delete(reverse("activity-detail", args=[activity["id"]]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Activity deleted successfully")
        self.assertEqual(
            response.data["deleted_activity"],
            {"id": activity["id"], "title": "Intro to AI"},
        )
        self.assertFalse(Activity.objects.filter(pk=activity["id"]).exists())

    def test_delete_unknown_activity(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(reverse("activity-detail", args=[999999]))
        self.assertEqual(response.status_code, 404)

    def test_delete_refused_while_check_ins_exist(self):
        activity = self._create_activity()
        self._check_in(self.member, activity["id"])

        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(reverse("activity-detail", args=[activity["id"]]))

        self.assertEqual(response.status_code, 412)
        self.assertEqual(response.data["code"], "precondition_failed")
        self.assertTrue(Activity.objects.filter(pk=activity["id"]).exists())

    # ---- check-ins ------------------------------------------------

    def test_check_in_review_and_reward_flow(self):
        activity = self._create_activity()

        response = self._check_in(self.member, activity["id"])
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], CheckIn.STATUS_PENDING)
        check_in_id = response.data["id"]

        self.member.refresh_from_db()
        self.assertEqual(self.member.gems, 0)

        response = self._review(check_in_id, CheckIn.STATUS_ATTENDED)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], CheckIn.STATUS_ATTENDED)
        self.assertEqual(response.data["gems_awarded"], 10)

        self.member.refresh_from_db()
        self.assertEqual(self.member.gems, 10)

        # Retry: refused, balance untouched
        response = self._review(check_in_id, CheckIn.STATUS_ATTENDED)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "invalid_transition")

        self.member.refresh_from_db()
        self.assertEqual(self.member.gems, 10)
        self.assertEqual(GemTransaction.objects.filter(user=self.member).count(), 1)

        check_in = CheckIn.objects.get(pk=check_in_id)
        self.assertEqual(check_in.reviewed_by, self.admin)
        self.assertIsNotNone(check_in.rewarded_at)

    def test_duplicate_check_in_conflicts(self):
        activity = self._create_activity()
        self.assertEqual(self._check_in(self.member, activity["id"]).status_code, 201)

        response = self._check_in(self.member, activity["id"])

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "conflict")
        self.assertEqual(CheckIn.objects.filter(user=self.member).count(), 1)

    def test_check_in_requires_evidence(self):
        activity = self._create_activity(requires_evidence=True)

        response = self._check_in(self.member, activity["id"])
        self.assertEqual(response.status_code, 400)

        response = self._check_in(self.member, activity["id"], evidence="https://example.com/selfie.jpg")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["evidence"], "https://example.com/selfie.jpg")

    def test_over_long_evidence_is_rejected_not_cut(self):
        activity = self._create_activity(requires_evidence=True)

        response = self._check_in(self.member, activity["id"], evidence="https://example.com/" + "a" * 3000)

        self.assertEqual(response.status_code, 400)
        self.assertIn("evidence", response.data["errors"])
        self.assertFalse(CheckIn.objects.exists())

    def test_check_in_closed_for_cancelled_activity(self):
        activity = self._create_activity(status=Activity.STATUS_CANCELLED)

        response = self._check_in(self.member, activity["id"])

        self.assertEqual(response.status_code, 412)
        self.assertFalse(CheckIn.objects.exists())

    def test_check_in_unknown_activity(self):
        response = self._check_in(self.member, 999999)
        self.assertEqual(response.status_code, 404)

    def test_check_in_requires_login(self):
        activity = self._create_activity()
        self.client.force_authenticate(user=None)

        response = self.client.post(reverse("activity-check-in", args=[activity["id"]]), {}, format="json")

        self.assertEqual(response.status_code, 401)

    def test_member_cannot_review(self):
        activity = self._create_activity()
        check_in_id = self._check_in(self.member, activity["id"]).data["id"]

        self.client.force_authenticate(user=self.member)
        response = self.client.post(
            reverse("check-in-review", args=[check_in_id]),
            {"decision": CheckIn.STATUS_ATTENDED},
            format="json",
        )

        self.assertEqual(response.status_code, 403)
        self.member.refresh_from_db()
        self.assertEqual(self.member.gems, 0)

    def test_review_rejects_unknown_decision(self):
        activity = self._create_activity()
        check_in_id = self._check_in(self.member, activity["id"]).data["id"]

        response = self._review(check_in_id, "maybe")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(CheckIn.objects.get(pk=check_in_id).status, CheckIn.STATUS_PENDING)

    def test_participants_with_stats(self):
        activity = self._create_activity()
        attended = self._check_in(self.member, activity["id"]).data["id"]
        self._check_in(self.other_member, activity["id"])
        self._review(attended, CheckIn.STATUS_ATTENDED)

        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse("activity-participants", args=[activity["id"]]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["activity"]["id"], activity["id"])
        self.assertEqual(
            response.data["stats"],
            {
                "total_participants": 2,
                "attended_count": 1,
                "pending_count": 1,
                "rejected_count": 0,
            },
        )

        by_user = {p["user_id"]: p for p in response.data["participants"]}
        self.assertEqual(by_user[self.member.pk]["username"], "member")
        self.assertEqual(by_user[self.member.pk]["club_role"], "Core Team")
        self.assertEqual(by_user[self.member.pk]["status"], CheckIn.STATUS_ATTENDED)

    def test_participants_admin_only(self):
        activity = self._create_activity()

        self.client.force_authenticate(user=self.member)
        response = self.client.get(reverse("activity-participants", args=[activity["id"]]))

        self.assertEqual(response.status_code, 403)

    def test_my_check_ins(self):
        first = self._create_activity(title="First")
        second = self._create_activity(title="Second")
        self._check_in(self.member, first["id"])
        self._check_in(self.member, second["id"])
        self._check_in(self.other_member, first["id"])

        self.client.force_authenticate(user=self.member)
        response = self.client.get(reverse("my-check-ins"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 2)
        self.assertEqual(
            {c["activity_title"] for c in response.data},
            {"First", "Second"},
        )

    def test_other_users_check_ins_are_private(self):
        self.client.force_authenticate(user=self.member)
        response = self.client.get(reverse("user-check-ins", args=[self.other_member.pk]))
        self.assertEqual(response.status_code, 403)

        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse("user-check-ins", args=[self.other_member.pk]))
        self.assertEqual(response.status_code, 200)
