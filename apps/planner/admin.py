from django.contrib import admin

from .models import Planner, ServiceBooking


class ServiceBookingInline(admin.TabularInline):
    model = ServiceBooking
    extra = 0
    raw_id_fields = ('user', 'service')


@admin.register(Planner)
class PlannerAdmin(admin.ModelAdmin):
    list_display = ('title', 'user', 'ticket', 'date', 'created_at')
    search_fields = ('title', 'user__email', 'ticket__raw_code')
    raw_id_fields = ('user', 'ticket')
    filter_horizontal = ('attractions', 'shows', 'services')
    inlines = [ServiceBookingInline]


@admin.register(ServiceBooking)
class ServiceBookingAdmin(admin.ModelAdmin):
    list_display = ('service', 'user', 'planner', 'booking_time', 'number_of_people')
    list_filter = ('booking_time',)
    search_fields = ('service__name', 'user__email')
    raw_id_fields = ('user', 'planner', 'service')
