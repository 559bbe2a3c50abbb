from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from modules.accounts.models import User


@admin.register(User)
class WorkflowUserAdmin(UserAdmin):
    list_display = ("username", "role", "is_active", "date_joined")
    list_filter = ("role", "is_active")
    fieldsets = UserAdmin.fieldsets + (("Workflow", {"fields": ("role",)}),)
    add_fieldsets = UserAdmin.add_fieldsets + (("Workflow", {"fields": ("role",)}),)
