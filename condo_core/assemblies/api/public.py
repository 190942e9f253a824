# condo_core/assemblies/api/public.py
"""
Unauthenticated endpoints used by a participant's phone after scanning the
assembly QR code. Identity comes from the check-in token + OTP, and then from
the session token returned by check-in.
"""
from __future__ import annotations

from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from condo_core.assemblies.api.serializers import (
    CheckinRequestSerializer,
    CheckinResponseSerializer,
    CheckinTokenValidationSerializer,
    CheckoutRequestSerializer,
    CheckoutResponseSerializer,
    OtpValidateRequestSerializer,
    OtpValidationSerializer,
    ProxyUploadResponseSerializer,
    ProxyUploadSerializer,
    SessionAgendaItemDetailSerializer,
    SessionAgendaItemSerializer,
    SessionDataSerializer,
    SessionStatusSerializer,
    SessionVoteSerializer,
    VoteSerializer,
)
from condo_core.assemblies.services.otp import OtpService
from condo_core.assemblies.services.participants import AttendanceService, ProxyService
from condo_core.assemblies.services.session import ParticipantSessionService


class PublicAssemblyView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []
    tenant_scoped = False

    def get_authenticate_header(self, request):
        # keeps 401 for bad OTP / session (DRF downgrades to 403 without a challenge)
        return 'Session realm="assembly"'


class CheckinView(PublicAssemblyView):
    @extend_schema(
        tags=["Assembly check-in"],
        operation_id="v1_assemblies_checkin",
        request=CheckinRequestSerializer,
        responses={201: CheckinResponseSerializer},
    )
    def post(self, request):
        ser = CheckinRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        data = AttendanceService.checkin(**ser.validated_data)
        return Response(CheckinResponseSerializer(data).data, status=status.HTTP_201_CREATED)


class CheckoutView(PublicAssemblyView):
    @extend_schema(
        tags=["Assembly check-in"],
        operation_id="v1_assemblies_checkout",
        request=CheckoutRequestSerializer,
        responses={200: CheckoutResponseSerializer},
    )
    def post(self, request):
        ser = CheckoutRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        data = AttendanceService.checkout(session_token=ser.validated_data["session_token"])
        return Response(CheckoutResponseSerializer(data).data)


class ValidateCheckinTokenView(PublicAssemblyView):
    @extend_schema(
        tags=["Assembly check-in"],
        operation_id="v1_assemblies_validate_checkin",
        responses={200: CheckinTokenValidationSerializer},
    )
    def get(self, request, token: str):
        return Response(CheckinTokenValidationSerializer(AttendanceService.validate_checkin_token(token=token)).data)


class ValidateCheckinOtpView(PublicAssemblyView):
    @extend_schema(
        tags=["Assembly check-in"],
        operation_id="v1_assemblies_validate_checkin_otp",
        request=OtpValidateRequestSerializer,
        responses={200: OtpValidationSerializer},
    )
    def post(self, request, token: str):
        ser = OtpValidateRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        data = OtpService.validate_assembly_otp_by_token(checkin_token=token, otp=ser.validated_data["otp"])
        return Response(OtpValidationSerializer(data).data)


class SessionView(PublicAssemblyView):
    @extend_schema(tags=["Assembly session"], operation_id="v1_assembly_session_retrieve", responses={200: SessionDataSerializer})
    def get(self, request, token: str):
        return Response(SessionDataSerializer(ParticipantSessionService.session_data(session_token=token)).data)


class SessionStatusView(PublicAssemblyView):
    @extend_schema(tags=["Assembly session"], operation_id="v1_assembly_session_status", responses={200: SessionStatusSerializer})
    def get(self, request, token: str):
        return Response(SessionStatusSerializer(ParticipantSessionService.status(session_token=token)).data)


class SessionAgendaView(PublicAssemblyView):
    @extend_schema(
        tags=["Assembly session"],
        operation_id="v1_assembly_session_agenda",
        responses={200: SessionAgendaItemSerializer(many=True)},
    )
    def get(self, request, token: str):
        rows = ParticipantSessionService.agenda(session_token=token)
        return Response(SessionAgendaItemSerializer(rows, many=True).data)


class SessionAgendaItemView(PublicAssemblyView):
    @extend_schema(
        tags=["Assembly session"],
        operation_id="v1_assembly_session_agenda_item",
        responses={200: SessionAgendaItemDetailSerializer},
    )
    def get(self, request, token: str, item_id):
        data = ParticipantSessionService.item_detail(session_token=token, item_id=item_id)
        return Response(SessionAgendaItemDetailSerializer(data).data)


class SessionVoteView(PublicAssemblyView):
    @extend_schema(
        tags=["Assembly session"],
        operation_id="v1_assembly_session_vote",
        request=SessionVoteSerializer,
        responses={201: VoteSerializer},
    )
    def post(self, request, token: str, item_id):
        ser = SessionVoteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        vote = ParticipantSessionService.vote(
            session_token=token,
            item_id=item_id,
            choice=ser.validated_data["choice"],
            otp=ser.validated_data.get("otp") or None,
        )
        return Response(VoteSerializer(vote).data, status=status.HTTP_201_CREATED)


class ProxyUploadView(PublicAssemblyView):
    """Signed proxy document (PDF, JPG or PNG) sent from the participant's phone."""

    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        tags=["Assembly session"],
        operation_id="v1_assembly_session_proxy_upload",
        request={"multipart/form-data": ProxyUploadSerializer},
        responses={201: ProxyUploadResponseSerializer},
    )
    def post(self, request, token: str):
        ser = ProxyUploadSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        p = ProxyService.upload_document(session_token=token, upload=ser.validated_data["file"])
        data = {
            "participant_id": p.id,
            "file_name": p.proxy_file_name,
            "file_url": p.proxy_file_url,
            "uploaded_at": timezone.now(),
        }
        return Response(ProxyUploadResponseSerializer(data).data, status=status.HTTP_201_CREATED)
