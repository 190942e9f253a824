# condo_core/units/filters.py
import django_filters
from django.db.models import Q

from condo_core.units.models import Unit, UnitStatus


class UnitFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=UnitStatus.choices)
    block = django_filters.CharFilter(field_name="block", lookup_expr="iexact")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Unit
        fields = ["status", "block"]

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(identifier__icontains=value) | Q(block__icontains=value) | Q(number__icontains=value)
        )
