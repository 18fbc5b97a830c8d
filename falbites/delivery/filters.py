import django_filters
from .models import Attendance


class AttendanceFilter(django_filters.FilterSet):
    date = django_filters.DateFilter(field_name='date')
    status = django_filters.ChoiceFilter(field_name='status', choices=Attendance.STATUS_CHOICES)
    partnerId = django_filters.NumberFilter(field_name='partner_id')

    class Meta:
        model = Attendance
        fields = ['date', 'status', 'partnerId']
