# condo_core/residents/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from condo_core.common.api.pagination import paginate
from condo_core.iam.roles import own_only_user_id
from condo_core.iam.scope import get_request_tenant_id
from condo_core.residents.api.serializers import (
    SUB_RECORD_SERIALIZERS,
    CompleteRegistrationSerializer,
    InviteCreateSerializer,
    InviteValidationSerializer,
    ResidentInviteSerializer,
    ResidentSerializer,
    ResidentUpdateSerializer,
)
from condo_core.residents.invites import InviteService
from condo_core.residents.models import Resident, ResidentInvite
from condo_core.residents.permissions import InvitePermission, ResidentPermission
from condo_core.residents.selectors import (
    get_resident,
    get_resident_for_user,
    list_invites,
    list_residents,
    list_residents_by_unit,
)
from condo_core.residents.services import ResidentService

SUB_RECORD_KINDS = "contacts|members|employees|vehicles|pets"

# payload list key -> sub-record kind
COMPLETE_SUB_RECORD_KEYS = {
    "emergency_contacts": "contacts",
    "household_members": "members",
    "employees": "employees",
    "vehicles": "vehicles",
    "pets": "pets",
}


@extend_schema_view(
    list=extend_schema(tags=["Residents"], operation_id="v1_residents_list", responses={200: ResidentSerializer(many=True)}),
    retrieve=extend_schema(tags=["Residents"], operation_id="v1_residents_retrieve", responses={200: ResidentSerializer}),
    me=extend_schema(tags=["Residents"], operation_id="v1_residents_me", responses={200: ResidentSerializer}),
    by_unit=extend_schema(tags=["Residents"], operation_id="v1_residents_by_unit", responses={200: ResidentSerializer(many=True)}),
    partial_update=extend_schema(tags=["Residents"], operation_id="v1_residents_update", request=ResidentUpdateSerializer, responses={200: ResidentSerializer}),
    destroy=extend_schema(tags=["Residents"], operation_id="v1_residents_delete", responses={204: None}),
    activate=extend_schema(tags=["Residents"], operation_id="v1_residents_activate", request=None, responses={200: ResidentSerializer}),
    deactivate=extend_schema(tags=["Residents"], operation_id="v1_residents_deactivate", request=None, responses={200: ResidentSerializer}),
    add_sub_record=extend_schema(tags=["Residents"], operation_id="v1_residents_add_sub_record", responses={201: OpenApiTypes.OBJECT}),
    remove_sub_record=extend_schema(tags=["Residents"], operation_id="v1_residents_remove_sub_record", request=None, responses={204: None}),
)
class ResidentViewSet(viewsets.ViewSet):
    permission_classes = [ResidentPermission]
    lookup_value_regex = r"[0-9a-fA-F-]{36}"

    serializer_class = ResidentSerializer
    queryset = Resident.objects.none()

    def list(self, request):
        qs = list_residents(
            tenant_id=get_request_tenant_id(request),
            search=(request.query_params.get("search") or "").strip(),
            status=request.query_params.get("status") or None,
        )
        return paginate(request, qs, ResidentSerializer)

    def retrieve(self, request, pk=None):
        resident = get_resident(tenant_id=get_request_tenant_id(request), resident_id=pk)
        own_only = own_only_user_id(request.user)
        if own_only is not None and resident.user_id != own_only:
            raise NotFound(f"Resident {pk} not found.")
        return Response(ResidentSerializer(resident).data)

    @action(detail=False, methods=["get"])
    def me(self, request):
        resident = get_resident_for_user(user_id=request.user.id)
        if resident is None or resident.tenant_id != get_request_tenant_id(request):
            raise NotFound("No resident record for this user in this tenant.")
        return Response(ResidentSerializer(resident).data)

    @action(detail=False, methods=["get"], url_path=r"unit/(?P<unit_id>[0-9a-fA-F-]{36})")
    def by_unit(self, request, unit_id=None):
        qs = list_residents_by_unit(tenant_id=get_request_tenant_id(request), unit_id=unit_id)
        return Response(ResidentSerializer(qs, many=True).data)

    def partial_update(self, request, pk=None):
        ser = ResidentUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        resident = ResidentService.update(
            tenant_id=get_request_tenant_id(request),
            resident_id=pk,
            restrict_to_user_id=own_only_user_id(request.user),
            **ser.validated_data,
        )
        return Response(ResidentSerializer(resident).data)

    def update(self, request, pk=None):
        return self.partial_update(request, pk=pk)

    def destroy(self, request, pk=None):
        ResidentService.delete(tenant_id=get_request_tenant_id(request), resident_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def activate(self, request, pk=None):
        resident = ResidentService.activate(tenant_id=get_request_tenant_id(request), resident_id=pk)
        return Response(ResidentSerializer(resident).data)

    @action(detail=True, methods=["post"])
    def deactivate(self, request, pk=None):
        resident = ResidentService.deactivate(tenant_id=get_request_tenant_id(request), resident_id=pk)
        return Response(ResidentSerializer(resident).data)

    @action(detail=True, methods=["post"], url_path=rf"(?P<kind>{SUB_RECORD_KINDS})")
    def add_sub_record(self, request, pk=None, kind=None):
        input_cls, output_cls = SUB_RECORD_SERIALIZERS[kind]
        ser = input_cls(data=request.data)
        ser.is_valid(raise_exception=True)

        record = ResidentService.add_sub_record(
            tenant_id=get_request_tenant_id(request),
            resident_id=pk,
            kind=kind,
            data=ser.validated_data,
            restrict_to_user_id=own_only_user_id(request.user),
        )
        return Response(output_cls(record).data, status=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["delete"],
        url_path=rf"(?P<kind>{SUB_RECORD_KINDS})/(?P<record_id>[0-9a-fA-F-]{{36}})",
    )
    def remove_sub_record(self, request, pk=None, kind=None, record_id=None):
        ResidentService.remove_sub_record(
            tenant_id=get_request_tenant_id(request),
            resident_id=pk,
            kind=kind,
            record_id=record_id,
            restrict_to_user_id=own_only_user_id(request.user),
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(tags=["Invites"], operation_id="v1_invites_list", responses={200: ResidentInviteSerializer(many=True)}),
    create=extend_schema(tags=["Invites"], operation_id="v1_invites_create", request=InviteCreateSerializer, responses={201: ResidentInviteSerializer}),
    resend=extend_schema(tags=["Invites"], operation_id="v1_invites_resend", request=None, responses={200: ResidentInviteSerializer}),
    destroy=extend_schema(tags=["Invites"], operation_id="v1_invites_cancel", responses={204: None}),
)
class InviteViewSet(viewsets.ViewSet):
    permission_classes = [InvitePermission]
    lookup_value_regex = r"[0-9a-fA-F-]{36}"

    serializer_class = ResidentInviteSerializer
    queryset = ResidentInvite.objects.none()

    def list(self, request):
        return Response(ResidentInviteSerializer(list_invites(tenant_id=get_request_tenant_id(request)), many=True).data)

    def create(self, request):
        ser = InviteCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        invite = InviteService.create(tenant_id=get_request_tenant_id(request), **ser.validated_data)
        return Response(ResidentInviteSerializer(invite).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def resend(self, request, pk=None):
        invite = InviteService.resend(tenant_id=get_request_tenant_id(request), invite_id=pk)
        return Response(ResidentInviteSerializer(invite).data)

    def destroy(self, request, pk=None):
        InviteService.cancel(tenant_id=get_request_tenant_id(request), invite_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class InviteValidateView(APIView):
    """Public: checks an invite token before showing the registration form."""

    permission_classes = [AllowAny]
    authentication_classes: list = []
    tenant_scoped = False

    @extend_schema(tags=["Invites"], operation_id="v1_invites_validate", responses={200: InviteValidationSerializer})
    def get(self, request, token: str):
        result = InviteService.validate(token=token)
        invite = result["invite"] if result["valid"] else None
        return Response(
            InviteValidationSerializer(
                {"valid": result["valid"], "reason": result["reason"], "invite": invite}
            ).data
        )


class InviteCompleteView(APIView):
    """Public: creates the user account and resident record from an invite."""

    permission_classes = [AllowAny]
    authentication_classes: list = []
    tenant_scoped = False

    @extend_schema(
        tags=["Invites"],
        operation_id="v1_invites_complete",
        request=CompleteRegistrationSerializer,
        responses={201: ResidentSerializer},
    )
    def post(self, request):
        ser = CompleteRegistrationSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        d = dict(ser.validated_data)

        sub_records = {kind: d.pop(key, None) or [] for key, kind in COMPLETE_SUB_RECORD_KEYS.items()}

        resident = InviteService.complete_registration(
            token=d.pop("invite_token"),
            sub_records=sub_records,
            **d,
        )
        return Response(ResidentSerializer(resident).data, status=status.HTTP_201_CREATED)
