from django import forms
from django.contrib import admin
from .models import Activity, CheckIn
from .state_machine import can_transition


class ActivityAdminForm(forms.ModelForm):
    class Meta:
        model = Activity
        fields = '__all__'

    def clean_status(self):
        # Same lifecycle rules as the API; creation may pick any status
        new_status = self.cleaned_data['status']
        if self.instance.pk:
            can, reason = can_transition(self.instance.status, new_status)
            if not can:
                raise forms.ValidationError(reason)
        return new_status


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    form = ActivityAdminForm
    list_display = ('title', 'type', 'status', 'starts_at', 'checkin_enabled', 'requires_evidence', 'gem_amount')
    list_filter = ('status', 'type', 'checkin_enabled', 'requires_evidence', 'starts_at')
    search_fields = ('title', 'description', 'location')
    date_hierarchy = 'starts_at'

@admin.register(CheckIn)
class CheckInAdmin(admin.ModelAdmin):
    list_display = ('user', 'activity', 'status', 'checked_at', 'reviewed_at', 'gems_awarded')
    list_filter = ('status', 'activity')
    search_fields = ('user__username', 'activity__title')
    # Decisions and rewards go through the review endpoint
    readonly_fields = ('status', 'reviewed_at', 'reviewed_by', 'rewarded_at', 'gems_awarded')
