import django_filters

from modules.locations.models import Location, LocationType


class LocationFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    type = django_filters.ChoiceFilter(field_name="type", choices=LocationType.choices)
    region = django_filters.CharFilter(field_name="region", lookup_expr="exact")
    city = django_filters.CharFilter(field_name="city", lookup_expr="exact")

    class Meta:
        model = Location
        fields = ["name", "type", "region", "city"]
