from .activities import (
    ActivityListCreateView,
    ActivityDetailView,
    ActivityParticipantsView,
)
from .check_ins import SubmitCheckInView, ReviewCheckInView, UserCheckInsView
