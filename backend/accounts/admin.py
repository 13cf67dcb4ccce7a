from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User


@admin.register(User)
class PlayerAdmin(UserAdmin):
    list_display = ("id", "username", "email", "cpf", "is_staff", "date_joined")
    search_fields = ("username", "email", "cpf")
    fieldsets = UserAdmin.fieldsets + (("Player", {"fields": ("cpf",)}),)
    add_fieldsets = UserAdmin.add_fieldsets + (("Player", {"fields": ("email", "cpf")}),)
