# condo_core/finance/filters.py
import django_filters

from condo_core.finance.models import FinancialTransaction, TransactionCategory, TransactionType


class TransactionFilter(django_filters.FilterSet):
    type = django_filters.ChoiceFilter(choices=TransactionType.choices)
    category = django_filters.ChoiceFilter(choices=TransactionCategory.choices)
    year = django_filters.NumberFilter(field_name="date", lookup_expr="year")
    # only applied together with year
    month = django_filters.NumberFilter(method="filter_month")

    class Meta:
        model = FinancialTransaction
        fields = ["type", "category"]

    def filter_month(self, queryset, name, value):
        if not value or not self.data.get("year"):
            return queryset
        return queryset.filter(date__month=value)
