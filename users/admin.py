from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User

@admin.register(User)
class CustomUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'role', 'club_role', 'is_staff', 'gems')
    list_filter = ('role', 'is_staff', 'is_superuser', 'is_active')
    search_fields = ('username', 'email', 'first_name', 'last_name')
    # Balances change only through the reward ledger
    readonly_fields = ('gems',)
    fieldsets = UserAdmin.fieldsets + (
        ('Club', {'fields': ('role', 'club_role', 'avatar', 'gems')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Club', {'fields': ('role', 'club_role', 'avatar')}),
    )
