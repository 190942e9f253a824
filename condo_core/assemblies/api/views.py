# condo_core/assemblies/api/views.py
from __future__ import annotations

from django.http import FileResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from condo_core.assemblies.api.serializers import (
    AgendaItemCreateSerializer,
    AgendaItemResultSerializer,
    AgendaItemSerializer,
    AgendaItemUpdateSerializer,
    AssemblyCreateSerializer,
    AssemblySerializer,
    AssemblyStatsSerializer,
    AssemblyUpdateSerializer,
    AttendanceStatsSerializer,
    AttendanceStatusSerializer,
    CastVoteSerializer,
    CheckinTokenSerializer,
    HasVotedSerializer,
    MinutesSerializer,
    MinutesUpdateSerializer,
    OtpSerializer,
    ParticipantRegisterSerializer,
    ParticipantSerializer,
    ParticipantUpdateSerializer,
    ProxyRejectSerializer,
    VoteSerializer,
    VoteSummarySerializer,
)
from condo_core.assemblies.models import AgendaItem, Assembly, AssemblyMinutes, AssemblyParticipant
from condo_core.assemblies.permissions import (
    AgendaItemPermission,
    AssemblyPermission,
    MinutesPermission,
    ParticipantPermission,
)
from condo_core.assemblies.selectors import (
    get_agenda_item,
    get_assembly,
    get_participant,
    list_agenda_items,
    list_assemblies,
    list_participants,
    list_upcoming,
    vote_for,
)
from condo_core.assemblies.services.assemblies import AgendaItemService, AssemblyService, VoteService
from condo_core.assemblies.services.minutes import MinutesService
from condo_core.assemblies.services.otp import OtpService
from condo_core.assemblies.services.participants import AttendanceService, ParticipantService, ProxyService
from condo_core.common.api.pagination import paginate
from condo_core.iam.scope import get_request_tenant_id

UUID_RE = r"[0-9a-fA-F-]{36}"


@extend_schema_view(
    list=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_list", responses={200: AssemblySerializer(many=True)}),
    retrieve=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_retrieve", responses={200: AssemblySerializer}),
    upcoming=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_upcoming", responses={200: AssemblySerializer(many=True)}),
    stats=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_stats", responses={200: AssemblyStatsSerializer}),
    create=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_create", request=AssemblyCreateSerializer, responses={201: AssemblySerializer}),
    partial_update=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_update", request=AssemblyUpdateSerializer, responses={200: AssemblySerializer}),
    destroy=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_delete", responses={204: None}),
    start=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_start", request=None, responses={200: AssemblySerializer}),
    finish=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_finish", request=None, responses={200: AssemblySerializer}),
    cancel=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_cancel", request=None, responses={200: AssemblySerializer}),
    generate_checkin_token=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_generate_checkin_token", request=None, responses={200: CheckinTokenSerializer}),
    attendance=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_attendance", responses={200: AttendanceStatusSerializer}),
    attendance_participants=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_attendance_participants", responses={200: ParticipantSerializer(many=True)}),
    generate_otp=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_otp_generate", request=None, responses={200: OtpSerializer}),
    current_otp=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_otp_current", responses={200: OtpSerializer}),
    pending_proxies=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_pending_proxies", responses={200: ParticipantSerializer(many=True)}),
    approve_proxy=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_proxy_approve", request=None, responses={200: ParticipantSerializer}),
    reject_proxy=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_proxy_reject", request=ProxyRejectSerializer, responses={200: ParticipantSerializer}),
    proxy_document=extend_schema(tags=["Assemblies"], operation_id="v1_assemblies_proxy_document", responses={(200, "application/octet-stream"): OpenApiTypes.BINARY}),
)
class AssemblyViewSet(viewsets.ViewSet):
    permission_classes = [AssemblyPermission]
    lookup_value_regex = UUID_RE

    serializer_class = AssemblySerializer
    queryset = Assembly.objects.none()

    def list(self, request):
        return paginate(request, list_assemblies(tenant_id=get_request_tenant_id(request)), AssemblySerializer)

    def retrieve(self, request, pk=None):
        return Response(AssemblySerializer(get_assembly(tenant_id=get_request_tenant_id(request), assembly_id=pk)).data)

    @action(detail=False, methods=["get"])
    def upcoming(self, request):
        qs = list_upcoming(tenant_id=get_request_tenant_id(request))
        return Response(AssemblySerializer(qs, many=True).data)

    @action(detail=True, methods=["get"])
    def stats(self, request, pk=None):
        return Response(AssemblyService.stats(tenant_id=get_request_tenant_id(request), assembly_id=pk))

    def create(self, request):
        ser = AssemblyCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        assembly = AssemblyService.create(
            tenant_id=get_request_tenant_id(request),
            created_by_id=request.user.id,
            **ser.validated_data,
        )
        return Response(AssemblySerializer(assembly).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = AssemblyUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        assembly = AssemblyService.update(tenant_id=get_request_tenant_id(request), assembly_id=pk, **ser.validated_data)
        return Response(AssemblySerializer(assembly).data)

    def update(self, request, pk=None):
        return self.partial_update(request, pk=pk)

    def destroy(self, request, pk=None):
        AssemblyService.delete(tenant_id=get_request_tenant_id(request), assembly_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def start(self, request, pk=None):
        return Response(AssemblySerializer(AssemblyService.start(tenant_id=get_request_tenant_id(request), assembly_id=pk)).data)

    @action(detail=True, methods=["post"])
    def finish(self, request, pk=None):
        return Response(AssemblySerializer(AssemblyService.finish(tenant_id=get_request_tenant_id(request), assembly_id=pk)).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        return Response(AssemblySerializer(AssemblyService.cancel(tenant_id=get_request_tenant_id(request), assembly_id=pk)).data)

    # --- attendance ---

    @action(detail=True, methods=["post"], url_path="generate-checkin-token")
    def generate_checkin_token(self, request, pk=None):
        data = AttendanceService.generate_checkin_token(tenant_id=get_request_tenant_id(request), assembly_id=pk)
        return Response(CheckinTokenSerializer(data).data)

    @action(detail=True, methods=["get"])
    def attendance(self, request, pk=None):
        data = AttendanceService.attendance_status(tenant_id=get_request_tenant_id(request), assembly_id=pk)
        return Response(AttendanceStatusSerializer(data).data)

    @action(detail=True, methods=["get"], url_path="attendance/participants")
    def attendance_participants(self, request, pk=None):
        qs = AttendanceService.participants(tenant_id=get_request_tenant_id(request), assembly_id=pk)
        return Response(ParticipantSerializer(qs, many=True).data)

    # --- check-in OTP ---

    @action(detail=True, methods=["post"], url_path="otp/generate")
    def generate_otp(self, request, pk=None):
        data = OtpService.generate_assembly_otp(tenant_id=get_request_tenant_id(request), assembly_id=pk)
        return Response(OtpSerializer(data).data)

    @action(detail=True, methods=["get"], url_path="otp")
    def current_otp(self, request, pk=None):
        data = OtpService.get_assembly_otp(tenant_id=get_request_tenant_id(request), assembly_id=pk)
        return Response(OtpSerializer(data).data if data else None)

    # --- proxies ---

    @action(detail=True, methods=["get"], url_path="pending-proxies")
    def pending_proxies(self, request, pk=None):
        rows = ProxyService.pending(tenant_id=get_request_tenant_id(request), assembly_id=pk)
        return Response(ParticipantSerializer(rows, many=True).data)

    @action(detail=True, methods=["post"], url_path=rf"participants/(?P<participant_id>{UUID_RE})/approve")
    def approve_proxy(self, request, pk=None, participant_id=None):
        participant = ProxyService.approve(
            tenant_id=get_request_tenant_id(request),
            assembly_id=pk,
            participant_id=participant_id,
            user=request.user,
        )
        return Response(ParticipantSerializer(participant).data)

    @action(detail=True, methods=["post"], url_path=rf"participants/(?P<participant_id>{UUID_RE})/reject")
    def reject_proxy(self, request, pk=None, participant_id=None):
        ser = ProxyRejectSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        participant = ProxyService.reject(
            tenant_id=get_request_tenant_id(request),
            assembly_id=pk,
            participant_id=participant_id,
            user=request.user,
            reason=ser.validated_data["reason"],
        )
        return Response(ParticipantSerializer(participant).data)

    @action(detail=True, methods=["get"], url_path=rf"participants/(?P<participant_id>{UUID_RE})/proxy")
    def proxy_document(self, request, pk=None, participant_id=None):
        participant = ProxyService.document(
            tenant_id=get_request_tenant_id(request),
            assembly_id=pk,
            participant_id=participant_id,
        )
        return FileResponse(
            participant.proxy_file.open("rb"),
            as_attachment=True,
            filename=participant.proxy_file_name or participant.proxy_file.name.rsplit("/", 1)[-1],
        )


@extend_schema_view(
    list=extend_schema(tags=["Agenda items"], operation_id="v1_agenda_items_list", responses={200: AgendaItemSerializer(many=True)}),
    retrieve=extend_schema(tags=["Agenda items"], operation_id="v1_agenda_items_retrieve", responses={200: AgendaItemSerializer}),
    create=extend_schema(tags=["Agenda items"], operation_id="v1_agenda_items_create", request=AgendaItemCreateSerializer, responses={201: AgendaItemSerializer}),
    partial_update=extend_schema(tags=["Agenda items"], operation_id="v1_agenda_items_update", request=AgendaItemUpdateSerializer, responses={200: AgendaItemSerializer}),
    destroy=extend_schema(tags=["Agenda items"], operation_id="v1_agenda_items_delete", responses={204: None}),
    start_voting=extend_schema(tags=["Agenda items"], operation_id="v1_agenda_items_start_voting", request=None, responses={200: AgendaItemSerializer}),
    close_voting=extend_schema(tags=["Agenda items"], operation_id="v1_agenda_items_close_voting", request=None, responses={200: AgendaItemSerializer}),
    result=extend_schema(tags=["Agenda items"], operation_id="v1_agenda_items_result", responses={200: AgendaItemResultSerializer}),
    generate_otp=extend_schema(tags=["Agenda items"], operation_id="v1_agenda_items_otp_generate", request=None, responses={200: OtpSerializer}),
    current_otp=extend_schema(tags=["Agenda items"], operation_id="v1_agenda_items_otp_current", responses={200: OtpSerializer}),
    votes=extend_schema(tags=["Votes"], operation_id="v1_votes_list", responses={200: VoteSerializer(many=True)}),
    vote_summary=extend_schema(tags=["Votes"], operation_id="v1_votes_summary", responses={200: VoteSummarySerializer}),
    cast_vote=extend_schema(tags=["Votes"], operation_id="v1_votes_cast", request=CastVoteSerializer, responses={201: VoteSerializer}),
    has_voted=extend_schema(tags=["Votes"], operation_id="v1_votes_check", responses={200: HasVotedSerializer}),
)
class AgendaItemViewSet(viewsets.ViewSet):
    """Agenda items of one assembly (nested under assemblies/<assembly_id>/)."""

    permission_classes = [AgendaItemPermission]

    serializer_class = AgendaItemSerializer
    queryset = AgendaItem.objects.none()

    def _assembly_id(self, request):
        assembly = get_assembly(tenant_id=get_request_tenant_id(request), assembly_id=self.kwargs["assembly_id"])
        return assembly.id

    def list(self, request, assembly_id=None):
        return Response(AgendaItemSerializer(list_agenda_items(assembly_id=self._assembly_id(request)), many=True).data)

    def retrieve(self, request, assembly_id=None, pk=None):
        item = get_agenda_item(assembly_id=self._assembly_id(request), item_id=pk)
        return Response(AgendaItemSerializer(item).data)

    def create(self, request, assembly_id=None):
        ser = AgendaItemCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        item = AgendaItemService.create(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id, **ser.validated_data)
        return Response(AgendaItemSerializer(item).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, assembly_id=None, pk=None):
        ser = AgendaItemUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        item = AgendaItemService.update(
            tenant_id=get_request_tenant_id(request),
            assembly_id=assembly_id,
            item_id=pk,
            **ser.validated_data,
        )
        return Response(AgendaItemSerializer(item).data)

    def update(self, request, assembly_id=None, pk=None):
        return self.partial_update(request, assembly_id=assembly_id, pk=pk)

    def destroy(self, request, assembly_id=None, pk=None):
        AgendaItemService.delete(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id, item_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    def start_voting(self, request, assembly_id=None, pk=None):
        item = AgendaItemService.start_voting(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id, item_id=pk)
        return Response(AgendaItemSerializer(item).data)

    def close_voting(self, request, assembly_id=None, pk=None):
        item = AgendaItemService.close_voting(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id, item_id=pk)
        return Response(AgendaItemSerializer(item).data)

    def result(self, request, assembly_id=None, pk=None):
        data = AgendaItemService.result(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id, item_id=pk)
        return Response(AgendaItemResultSerializer(data).data)

    def generate_otp(self, request, assembly_id=None, pk=None):
        data = OtpService.generate_voting_otp(assembly_id=self._assembly_id(request), item_id=pk)
        return Response(OtpSerializer(data).data)

    def current_otp(self, request, assembly_id=None, pk=None):
        data = OtpService.get_voting_otp(assembly_id=self._assembly_id(request), item_id=pk)
        return Response(OtpSerializer(data).data if data else None)

    # --- votes ---

    def votes(self, request, assembly_id=None, pk=None):
        qs = VoteService.votes(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id, item_id=pk)
        return Response(VoteSerializer(qs, many=True).data)

    def vote_summary(self, request, assembly_id=None, pk=None):
        item = get_agenda_item(assembly_id=self._assembly_id(request), item_id=pk)
        return Response(VoteSummarySerializer(VoteService.summary(item_id=item.id).as_dict()).data)

    def cast_vote(self, request, assembly_id=None, pk=None, participant_id=None):
        ser = CastVoteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        item = get_agenda_item(assembly_id=self._assembly_id(request), item_id=pk)
        vote = VoteService.cast(item_id=item.id, participant_id=participant_id, choice=ser.validated_data["choice"])
        return Response(VoteSerializer(vote).data, status=status.HTTP_201_CREATED)

    def has_voted(self, request, assembly_id=None, pk=None, participant_id=None):
        item = get_agenda_item(assembly_id=self._assembly_id(request), item_id=pk)
        vote = vote_for(item_id=item.id, participant_id=participant_id)
        return Response({"has_voted": vote is not None, "vote": VoteSerializer(vote).data if vote else None})


@extend_schema_view(
    list=extend_schema(tags=["Participants"], operation_id="v1_participants_list", responses={200: ParticipantSerializer(many=True)}),
    retrieve=extend_schema(tags=["Participants"], operation_id="v1_participants_retrieve", responses={200: ParticipantSerializer}),
    attendance=extend_schema(tags=["Participants"], operation_id="v1_participants_attendance", responses={200: AttendanceStatsSerializer}),
    create=extend_schema(tags=["Participants"], operation_id="v1_participants_register", request=ParticipantRegisterSerializer, responses={201: ParticipantSerializer}),
    partial_update=extend_schema(tags=["Participants"], operation_id="v1_participants_update", request=ParticipantUpdateSerializer, responses={200: ParticipantSerializer}),
    destroy=extend_schema(tags=["Participants"], operation_id="v1_participants_remove", responses={204: None}),
    join=extend_schema(tags=["Participants"], operation_id="v1_participants_join", request=None, responses={200: ParticipantSerializer}),
    leave=extend_schema(tags=["Participants"], operation_id="v1_participants_leave", request=None, responses={200: ParticipantSerializer}),
)
class ParticipantViewSet(viewsets.ViewSet):
    permission_classes = [ParticipantPermission]

    serializer_class = ParticipantSerializer
    queryset = AssemblyParticipant.objects.none()

    def list(self, request, assembly_id=None):
        assembly = get_assembly(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id)
        return Response(ParticipantSerializer(list_participants(assembly_id=assembly.id), many=True).data)

    def retrieve(self, request, assembly_id=None, pk=None):
        assembly = get_assembly(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id)
        return Response(ParticipantSerializer(get_participant(assembly_id=assembly.id, participant_id=pk)).data)

    def attendance(self, request, assembly_id=None):
        data = ParticipantService.attendance_stats(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id)
        return Response(AttendanceStatsSerializer(data).data)

    def create(self, request, assembly_id=None):
        ser = ParticipantRegisterSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        participant = ParticipantService.register(
            tenant_id=get_request_tenant_id(request),
            assembly_id=assembly_id,
            **ser.validated_data,
        )
        return Response(ParticipantSerializer(participant).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, assembly_id=None, pk=None):
        ser = ParticipantUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        participant = ParticipantService.update(
            tenant_id=get_request_tenant_id(request),
            assembly_id=assembly_id,
            participant_id=pk,
            **ser.validated_data,
        )
        return Response(ParticipantSerializer(participant).data)

    def update(self, request, assembly_id=None, pk=None):
        return self.partial_update(request, assembly_id=assembly_id, pk=pk)

    def destroy(self, request, assembly_id=None, pk=None):
        ParticipantService.remove(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id, participant_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    def join(self, request, assembly_id=None, pk=None):
        participant = ParticipantService.join(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id, participant_id=pk)
        return Response(ParticipantSerializer(participant).data)

    def leave(self, request, assembly_id=None, pk=None):
        participant = ParticipantService.leave(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id, participant_id=pk)
        return Response(ParticipantSerializer(participant).data)


@extend_schema_view(
    retrieve=extend_schema(tags=["Minutes"], operation_id="v1_minutes_retrieve", responses={200: MinutesSerializer}),
    generate=extend_schema(tags=["Minutes"], operation_id="v1_minutes_generate", request=None, responses={200: MinutesSerializer}),
    partial_update=extend_schema(tags=["Minutes"], operation_id="v1_minutes_update", request=MinutesUpdateSerializer, responses={200: MinutesSerializer}),
    approve=extend_schema(tags=["Minutes"], operation_id="v1_minutes_approve", request=None, responses={200: MinutesSerializer}),
    publish=extend_schema(tags=["Minutes"], operation_id="v1_minutes_publish", request=None, responses={200: MinutesSerializer}),
)
class MinutesViewSet(viewsets.ViewSet):
    permission_classes = [MinutesPermission]

    serializer_class = MinutesSerializer
    queryset = AssemblyMinutes.objects.none()

    def retrieve(self, request, assembly_id=None):
        return Response(MinutesSerializer(MinutesService.get(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id)).data)

    def generate(self, request, assembly_id=None):
        minutes = MinutesService.generate(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id)
        return Response(MinutesSerializer(minutes).data)

    def partial_update(self, request, assembly_id=None):
        ser = MinutesUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        minutes = MinutesService.update(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id, **ser.validated_data)
        return Response(MinutesSerializer(minutes).data)

    def update(self, request, assembly_id=None):
        return self.partial_update(request, assembly_id=assembly_id)

    def approve(self, request, assembly_id=None):
        minutes = MinutesService.approve(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id, user=request.user)
        return Response(MinutesSerializer(minutes).data)

    def publish(self, request, assembly_id=None):
        minutes = MinutesService.publish(tenant_id=get_request_tenant_id(request), assembly_id=assembly_id)
        return Response(MinutesSerializer(minutes).data)
