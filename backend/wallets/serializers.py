from decimal import Decimal

from rest_framework import serializers

from .models import Wallet, WalletTransaction

PIX_KEY_TYPES = ["cpf", "cnpj", "email", "phone", "random"]


class DepositSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))


class WithdrawalSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    pix_key_type = serializers.ChoiceField(choices=PIX_KEY_TYPES)
    pix_key = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class WalletTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = WalletTransaction
        fields = [
            "id",
            "tx_type",
            "amount",
            "status",
            "pix_qr_code",
            "pix_qr_code_base64",
            "pix_key_type",
            "expires_at",
            "admin_notes",
            "created_at",
        ]


class AdminTransactionSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True)
    email = serializers.CharField(source="user.email", read_only=True)

    class Meta:
        model = WalletTransaction
        fields = [
            "id",
            "user_id",
            "username",
            "email",
            "tx_type",
            "amount",
            "status",
            "gateway_id",
            "pix_key_type",
            "pix_key",
            "admin_notes",
            "created_at",
            "updated_at",
        ]


class WalletSerializer(serializers.ModelSerializer):
    class Meta:
        model = Wallet
        fields = ["balance", "rollover_required", "first_deposit_made", "updated_at"]
