# condo_core/assemblies/api/urls.py
from __future__ import annotations

from django.urls import path

from condo_core.assemblies.api.public import (
    CheckinView,
    CheckoutView,
    ProxyUploadView,
    SessionAgendaItemView,
    SessionAgendaView,
    SessionStatusView,
    SessionView,
    SessionVoteView,
    ValidateCheckinOtpView,
    ValidateCheckinTokenView,
)
from condo_core.assemblies.api.views import AgendaItemViewSet, MinutesViewSet, ParticipantViewSet

app_name = "assemblies"

agenda_list = AgendaItemViewSet.as_view({"get": "list", "post": "create"})
agenda_detail = AgendaItemViewSet.as_view(
    {"get": "retrieve", "put": "update", "patch": "partial_update", "delete": "destroy"}
)
participant_list = ParticipantViewSet.as_view({"get": "list", "post": "create"})
participant_detail = ParticipantViewSet.as_view(
    {"get": "retrieve", "put": "update", "patch": "partial_update", "delete": "destroy"}
)
minutes_detail = MinutesViewSet.as_view({"get": "retrieve", "put": "update", "patch": "partial_update"})

ITEM = "assemblies/<uuid:assembly_id>/agenda-items/<uuid:pk>/"
PARTICIPANT = "assemblies/<uuid:assembly_id>/participants/<uuid:pk>/"
MINUTES = "assemblies/<uuid:assembly_id>/minutes/"

urlpatterns = [
    # public: QR check-in
    path("assemblies/checkin/", CheckinView.as_view(), name="checkin"),
    path("assemblies/checkin/validate-otp/<str:token>/", ValidateCheckinOtpView.as_view(), name="checkin-validate-otp"),
    path("assemblies/checkout/", CheckoutView.as_view(), name="checkout"),
    path("assemblies/validate-checkin/<str:token>/", ValidateCheckinTokenView.as_view(), name="validate-checkin"),

    # public: participant session
    path("assemblies/session/<str:token>/", SessionView.as_view(), name="session"),
    path("assemblies/session/<str:token>/status/", SessionStatusView.as_view(), name="session-status"),
    path("assemblies/session/<str:token>/agenda/", SessionAgendaView.as_view(), name="session-agenda"),
    path("assemblies/session/<str:token>/agenda/<uuid:item_id>/", SessionAgendaItemView.as_view(), name="session-agenda-item"),
    path("assemblies/session/<str:token>/agenda/<uuid:item_id>/vote/", SessionVoteView.as_view(), name="session-vote"),
    path("assemblies/session/<str:token>/proxy/", ProxyUploadView.as_view(), name="session-proxy-upload"),

    # agenda items + votes
    path("assemblies/<uuid:assembly_id>/agenda-items/", agenda_list, name="agenda-items"),
    path(ITEM, agenda_detail, name="agenda-item-detail"),
    path(ITEM + "start-voting/", AgendaItemViewSet.as_view({"post": "start_voting"}), name="agenda-item-start-voting"),
    path(ITEM + "close-voting/", AgendaItemViewSet.as_view({"post": "close_voting"}), name="agenda-item-close-voting"),
    path(ITEM + "result/", AgendaItemViewSet.as_view({"get": "result"}), name="agenda-item-result"),
    path(ITEM + "otp/", AgendaItemViewSet.as_view({"get": "current_otp"}), name="agenda-item-otp"),
    path(ITEM + "otp/generate/", AgendaItemViewSet.as_view({"post": "generate_otp"}), name="agenda-item-otp-generate"),
    path(ITEM + "votes/", AgendaItemViewSet.as_view({"get": "votes"}), name="votes"),
    path(ITEM + "votes/summary/", AgendaItemViewSet.as_view({"get": "vote_summary"}), name="votes-summary"),
    path(
        ITEM + "votes/check/<uuid:participant_id>/",
        AgendaItemViewSet.as_view({"get": "has_voted"}),
        name="votes-check",
    ),
    path(
        ITEM + "votes/<uuid:participant_id>/",
        AgendaItemViewSet.as_view({"post": "cast_vote"}),
        name="votes-cast",
    ),

    # participants
    path("assemblies/<uuid:assembly_id>/participants/", participant_list, name="participants"),
    path(
        "assemblies/<uuid:assembly_id>/participants/attendance/",
        ParticipantViewSet.as_view({"get": "attendance"}),
        name="participants-attendance",
    ),
    path(PARTICIPANT, participant_detail, name="participant-detail"),
    path(PARTICIPANT + "join/", ParticipantViewSet.as_view({"post": "join"}), name="participant-join"),
    path(PARTICIPANT + "leave/", ParticipantViewSet.as_view({"post": "leave"}), name="participant-leave"),

    # minutes
    path(MINUTES, minutes_detail, name="minutes"),
    path(MINUTES + "generate/", MinutesViewSet.as_view({"post": "generate"}), name="minutes-generate"),
    path(MINUTES + "approve/", MinutesViewSet.as_view({"post": "approve"}), name="minutes-approve"),
    path(MINUTES + "publish/", MinutesViewSet.as_view({"post": "publish"}), name="minutes-publish"),
]
