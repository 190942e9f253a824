# condo_core/finance/api/views.py
from __future__ import annotations

from django.http import HttpResponse
from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from condo_core.common.api.pagination import paginate
from condo_core.finance import reports
from condo_core.finance.api.serializers import (
    ApplyRecurringSerializer,
    BudgetCreateSerializer,
    BudgetQuerySerializer,
    BudgetSerializer,
    BudgetUpdateSerializer,
    BudgetWithSpentSerializer,
    FinanceOverviewSerializer,
    FinanceSummarySerializer,
    PeriodQuerySerializer,
    RecurringCreateSerializer,
    RecurringEntrySerializer,
    RecurringUpdateSerializer,
    TransactionCreateSerializer,
    TransactionSerializer,
    TransactionUpdateSerializer,
)
from condo_core.finance.models import Budget, FinancialTransaction, RecurringEntry
from condo_core.finance.permissions import FinancePermission
from condo_core.finance.selectors import get_recurring, get_transaction, list_recurring, list_transactions
from condo_core.finance.services import BudgetService, RecurringService, TransactionService
from condo_core.iam.scope import get_request_tenant_id

UUID_RE = r"[0-9a-fA-F-]{36}"

YEAR_PARAM = OpenApiParameter("year", OpenApiTypes.INT, OpenApiParameter.QUERY, required=False)
MONTH_PARAM = OpenApiParameter("month", OpenApiTypes.INT, OpenApiParameter.QUERY, required=False)
TRANSACTION_LIST_PARAMS = [
    YEAR_PARAM,
    MONTH_PARAM,
    OpenApiParameter("type", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False),
    OpenApiParameter("category", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False),
]


def _period(request) -> dict:
    ser = PeriodQuerySerializer(data=request.query_params)
    ser.is_valid(raise_exception=True)
    return ser.validated_data


@extend_schema_view(
    list=extend_schema(tags=["Finance"], operation_id="v1_finance_transactions_list", parameters=TRANSACTION_LIST_PARAMS, responses={200: TransactionSerializer(many=True)}),
    retrieve=extend_schema(tags=["Finance"], operation_id="v1_finance_transactions_retrieve", responses={200: TransactionSerializer}),
    create=extend_schema(tags=["Finance"], operation_id="v1_finance_transactions_create", request=TransactionCreateSerializer, responses={201: TransactionSerializer}),
    partial_update=extend_schema(tags=["Finance"], operation_id="v1_finance_transactions_update", request=TransactionUpdateSerializer, responses={200: TransactionSerializer}),
    destroy=extend_schema(tags=["Finance"], operation_id="v1_finance_transactions_delete", responses={204: None}),
)
class TransactionViewSet(viewsets.ViewSet):
    permission_classes = [FinancePermission]
    lookup_value_regex = UUID_RE

    serializer_class = TransactionSerializer
    queryset = FinancialTransaction.objects.none()

    def list(self, request):
        qs = list_transactions(tenant_id=get_request_tenant_id(request), params=request.query_params)
        return paginate(request, qs, TransactionSerializer)

    def retrieve(self, request, pk=None):
        tx = get_transaction(tenant_id=get_request_tenant_id(request), transaction_id=pk)
        return Response(TransactionSerializer(tx).data)

    def create(self, request):
        ser = TransactionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        tx = TransactionService.create(tenant_id=get_request_tenant_id(request), user=request.user, **ser.validated_data)
        return Response(TransactionSerializer(tx).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = TransactionUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        tx = TransactionService.update(tenant_id=get_request_tenant_id(request), transaction_id=pk, **ser.validated_data)
        return Response(TransactionSerializer(tx).data)

    def update(self, request, pk=None):
        return self.partial_update(request, pk=pk)

    def destroy(self, request, pk=None):
        TransactionService.delete(tenant_id=get_request_tenant_id(request), transaction_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    summary=extend_schema(tags=["Finance"], operation_id="v1_finance_summary", parameters=[YEAR_PARAM, MONTH_PARAM], responses={200: FinanceSummarySerializer}),
    overview=extend_schema(tags=["Finance"], operation_id="v1_finance_overview", parameters=[YEAR_PARAM], responses={200: FinanceOverviewSerializer}),
    export_csv=extend_schema(
        tags=["Finance"],
        operation_id="v1_finance_export_csv",
        parameters=[YEAR_PARAM, MONTH_PARAM],
        responses={(200, "text/csv"): OpenApiTypes.STR},
    ),
)
class FinanceReportViewSet(viewsets.ViewSet):
    permission_classes = [FinancePermission]

    @action(detail=False, methods=["get"])
    def summary(self, request):
        period = _period(request)
        data = reports.summary(tenant_id=get_request_tenant_id(request), **period)
        return Response(FinanceSummarySerializer(data).data)

    @action(detail=False, methods=["get"])
    def overview(self, request):
        year = _period(request).get("year") or timezone.localdate().year
        data = reports.overview(tenant_id=get_request_tenant_id(request), year=year)
        return Response(FinanceOverviewSerializer(data).data)

    @action(detail=False, methods=["get"], url_path="export/csv")
    def export_csv(self, request):
        period = _period(request)
        content = reports.export_csv(tenant_id=get_request_tenant_id(request), **period)

        filename = f"finance-{period.get('year') or 'all'}-{period.get('month') or 'all'}.csv"
        # BOM so spreadsheet tools detect UTF-8
        response = HttpResponse("\ufeff" + content, content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response


@extend_schema_view(
    list=extend_schema(
        tags=["Finance"],
        operation_id="v1_finance_budgets_list",
        parameters=[OpenApiParameter("year", OpenApiTypes.INT, OpenApiParameter.QUERY, required=True), MONTH_PARAM],
        responses={200: BudgetWithSpentSerializer(many=True)},
    ),
    create=extend_schema(tags=["Finance"], operation_id="v1_finance_budgets_create", request=BudgetCreateSerializer, responses={201: BudgetSerializer}),
    partial_update=extend_schema(tags=["Finance"], operation_id="v1_finance_budgets_update", request=BudgetUpdateSerializer, responses={200: BudgetSerializer}),
    destroy=extend_schema(tags=["Finance"], operation_id="v1_finance_budgets_delete", responses={204: None}),
)
class BudgetViewSet(viewsets.ViewSet):
    permission_classes = [FinancePermission]
    lookup_value_regex = UUID_RE

    serializer_class = BudgetSerializer
    queryset = Budget.objects.none()

    def list(self, request):
        query = BudgetQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        rows = reports.budgets_with_spent(tenant_id=get_request_tenant_id(request), **query.validated_data)
        return Response(BudgetWithSpentSerializer(rows, many=True).data)

    def create(self, request):
        ser = BudgetCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        budget = BudgetService.create(tenant_id=get_request_tenant_id(request), **ser.validated_data)
        return Response(BudgetSerializer(budget).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = BudgetUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        budget = BudgetService.update(tenant_id=get_request_tenant_id(request), budget_id=pk, **ser.validated_data)
        return Response(BudgetSerializer(budget).data)

    def update(self, request, pk=None):
        return self.partial_update(request, pk=pk)

    def destroy(self, request, pk=None):
        BudgetService.delete(tenant_id=get_request_tenant_id(request), budget_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(
        tags=["Finance"],
        operation_id="v1_finance_recurring_list",
        parameters=[OpenApiParameter("active_only", OpenApiTypes.BOOL, OpenApiParameter.QUERY, required=False)],
        responses={200: RecurringEntrySerializer(many=True)},
    ),
    retrieve=extend_schema(tags=["Finance"], operation_id="v1_finance_recurring_retrieve", responses={200: RecurringEntrySerializer}),
    create=extend_schema(tags=["Finance"], operation_id="v1_finance_recurring_create", request=RecurringCreateSerializer, responses={201: RecurringEntrySerializer}),
    partial_update=extend_schema(tags=["Finance"], operation_id="v1_finance_recurring_update", request=RecurringUpdateSerializer, responses={200: RecurringEntrySerializer}),
    destroy=extend_schema(tags=["Finance"], operation_id="v1_finance_recurring_delete", responses={204: None}),
    toggle=extend_schema(tags=["Finance"], operation_id="v1_finance_recurring_toggle", request=None, responses={200: RecurringEntrySerializer}),
    apply=extend_schema(tags=["Finance"], operation_id="v1_finance_recurring_apply", request=ApplyRecurringSerializer, responses={201: TransactionSerializer}),
)
class RecurringEntryViewSet(viewsets.ViewSet):
    permission_classes = [FinancePermission]
    lookup_value_regex = UUID_RE

    serializer_class = RecurringEntrySerializer
    queryset = RecurringEntry.objects.none()

    def list(self, request):
        active_only = str(request.query_params.get("active_only") or "").lower() in ("1", "true", "yes")
        qs = list_recurring(tenant_id=get_request_tenant_id(request), active_only=active_only)
        return Response(RecurringEntrySerializer(qs, many=True).data)

    def retrieve(self, request, pk=None):
        entry = get_recurring(tenant_id=get_request_tenant_id(request), recurring_id=pk)
        return Response(RecurringEntrySerializer(entry).data)

    def create(self, request):
        ser = RecurringCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        entry = RecurringService.create(tenant_id=get_request_tenant_id(request), user=request.user, **ser.validated_data)
        return Response(RecurringEntrySerializer(entry).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = RecurringUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        entry = RecurringService.update(tenant_id=get_request_tenant_id(request), recurring_id=pk, **ser.validated_data)
        return Response(RecurringEntrySerializer(entry).data)

    def update(self, request, pk=None):
        return self.partial_update(request, pk=pk)

    def destroy(self, request, pk=None):
        RecurringService.delete(tenant_id=get_request_tenant_id(request), recurring_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post", "patch"])
    def toggle(self, request, pk=None):
        entry = RecurringService.toggle(tenant_id=get_request_tenant_id(request), recurring_id=pk)
        return Response(RecurringEntrySerializer(entry).data)

    @action(detail=True, methods=["post"])
    def apply(self, request, pk=None):
        ser = ApplyRecurringSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        tx = RecurringService.apply(
            tenant_id=get_request_tenant_id(request),
            recurring_id=pk,
            user=request.user,
            on=ser.validated_data["date"],
        )
        return Response(TransactionSerializer(tx).data, status=status.HTTP_201_CREATED)
