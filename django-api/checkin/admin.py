from django.contrib import admin

from checkin.models import CheckIn, Event, EventAuthorization, Profile, Ticket


class EventAuthorizationInline(admin.TabularInline):
    model = EventAuthorization
    fk_name = "event"
    extra = 1
    raw_id_fields = ["authorized_user", "authorized_by"]


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "is_organizer", "created_at"]
    search_fields = ["name", "email"]
    list_filter = ["is_organizer"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "organizer", "date", "time", "location", "status"]
    search_fields = ["title", "location"]
    list_filter = ["status", "ticket_type"]
    inlines = [EventAuthorizationInline]


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ["qr_code", "attendee_name", "event", "payment_status", "checked_in", "checked_in_at"]
    search_fields = ["qr_code", "attendee_name", "attendee_email"]
    list_filter = ["event", "payment_status", "checked_in"]
    # Redemption goes through the check-in API only.
    readonly_fields = ["checked_in", "checked_in_at"]


@admin.register(EventAuthorization)
class EventAuthorizationAdmin(admin.ModelAdmin):
    list_display = ["authorized_user", "event", "status", "authorized_by", "created_at"]
    list_filter = ["status", "event"]


@admin.register(CheckIn)
class CheckInAdmin(admin.ModelAdmin):
    list_display = ["ticket", "event", "checked_in_by", "checked_in_at"]
    list_filter = ["event"]

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False
