# users/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import UserAccount


@admin.register(UserAccount)
class UserAccountAdmin(UserAdmin):
    list_display = ('email', 'first_name', 'id', 'is_staff')
    search_fields = ('email', 'first_name', 'username')
