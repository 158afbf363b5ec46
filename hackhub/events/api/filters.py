import django_filters

from hackhub.events.models import Event


class EventFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Event.Status.choices)
    organizer = django_filters.NumberFilter(field_name="organizer__id")

    class Meta:
        model = Event
        fields = ["status", "organizer"]
