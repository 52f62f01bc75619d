from django.contrib import admin
from .models import GemTransaction

@admin.register(GemTransaction)
class GemTransactionAdmin(admin.ModelAdmin):
    list_display = ('user', 'amount', 'reason', 'check_in', 'created_at')
    list_filter = ('reason', 'created_at')
    search_fields = ('user__username',)
    readonly_fields = ('user', 'amount', 'reason', 'check_in', 'created_at')

    # Ledger rows are written only by the reward accountant and never removed
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
