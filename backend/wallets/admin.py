from django.contrib import admin

from .models import Wallet, WalletTransaction


@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
    list_display = ("user", "balance", "rollover_required", "first_deposit_made", "updated_at")
    search_fields = ("user__username", "user__email")
    readonly_fields = ("balance", "rollover_required", "first_deposit_made", "updated_at")


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "tx_type", "amount", "status", "gateway_id", "created_at")
    list_filter = ("tx_type", "status")
    search_fields = ("id", "gateway_id", "user__email")
    readonly_fields = ("id", "amount", "gateway_id", "gateway_data", "created_at", "updated_at")
