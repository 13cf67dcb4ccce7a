from django.contrib import admin
from .models import GameRound


@admin.register(GameRound)
class GameRoundAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "game_type", "bet_amount", "prize_amount", "multiplier", "created_at")
    list_filter = ("game_type",)
    search_fields = ("id", "user__email", "user__username")
    readonly_fields = ("id", "user", "game_type", "bet_amount", "prize_amount", "multiplier", "result_data", "created_at")

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
