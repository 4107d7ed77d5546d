from django.contrib import admin

from .models import (
    Attraction,
    Show,
    Service,
    TicketType,
    TicketTypeAttraction,
    TicketTypeShow,
    TicketTypeService,
    Discount,
)


@admin.register(Attraction)
class AttractionAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'location', 'wait_time', 'updated_at')
    list_filter = ('category',)
    search_fields = ('name', 'location')


@admin.register(Show)
class ShowAdmin(admin.ModelAdmin):
    list_display = ('title', 'location', 'start_time', 'end_time', 'status')
    list_filter = ('status', 'start_time')
    search_fields = ('title', 'location')
    ordering = ('start_time',)


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ('name', 'type', 'location')
    list_filter = ('type',)
    search_fields = ('name',)


class TicketTypeAttractionInline(admin.TabularInline):
    model = TicketTypeAttraction
    extra = 0


class TicketTypeShowInline(admin.TabularInline):
    model = TicketTypeShow
    extra = 0


class TicketTypeServiceInline(admin.TabularInline):
    model = TicketTypeService
    extra = 0


@admin.register(TicketType)
class TicketTypeAdmin(admin.ModelAdmin):
    list_display = ('name', 'price', 'created_at')
    search_fields = ('name',)
    inlines = [TicketTypeAttractionInline, TicketTypeShowInline, TicketTypeServiceInline]


@admin.register(Discount)
class DiscountAdmin(admin.ModelAdmin):
    list_display = ('name', 'percentage', 'is_active')
    list_filter = ('is_active',)
