from django.urls import path
from .views import (
    ActivityListCreateView,
    ActivityDetailView,
    ActivityParticipantsView,
    SubmitCheckInView,
    ReviewCheckInView,
    UserCheckInsView,
)

urlpatterns = [
    path("", ActivityListCreateView.as_view(), name="activity-list-create"),
    path("<int:pk>/", ActivityDetailView.as_view(), name="activity-detail"),

    # Admin review
    path("<int:activity_id>/participants/", ActivityParticipantsView.as_view(), name="activity-participants"),

    # Check-ins
    path("<int:activity_id>/check-in/", SubmitCheckInView.as_view(), name="activity-check-in"),
    path("check-ins/<int:check_in_id>/review/", ReviewCheckInView.as_view(), name="check-in-review"),
    path("me/check-ins/", UserCheckInsView.as_view(), name="my-check-ins"),
    path("users/<int:user_id>/check-ins/", UserCheckInsView.as_view(), name="user-check-ins"),
]
