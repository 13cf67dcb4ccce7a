import re

from rest_framework import serializers
from django.contrib.auth import get_user_model

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=6)
    balance = serializers.DecimalField(source="wallet.balance", max_digits=12, decimal_places=2, read_only=True)
    rollover_required = serializers.DecimalField(
        source="wallet.rollover_required", max_digits=12, decimal_places=2, read_only=True
    )
    first_deposit_made = serializers.BooleanField(source="wallet.first_deposit_made", read_only=True)

    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "email",
            "password",
            "cpf",
            "is_staff",
            "balance",
            "rollover_required",
            "first_deposit_made",
            "date_joined",
        )
        read_only_fields = ("is_staff", "date_joined")
        extra_kwargs = {
            "email": {"required": True},
        }

    def to_internal_value(self, data):
        # CPF arrives formatted (000.000.000-00) from most forms
        if hasattr(data, "copy") and data.get("cpf"):
            data = data.copy()
            data["cpf"] = re.sub(r"\D", "", str(data["cpf"]))
        return super().to_internal_value(data)

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("This email is already registered.")
        return value.lower()

    def create(self, validated_data):
        password = validated_data.pop("password")

        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user


class AdminUserSerializer(serializers.ModelSerializer):
    balance = serializers.DecimalField(source="wallet.balance", max_digits=12, decimal_places=2, read_only=True)
    rollover_required = serializers.DecimalField(
        source="wallet.rollover_required", max_digits=12, decimal_places=2, read_only=True
    )
    first_deposit_made = serializers.BooleanField(source="wallet.first_deposit_made", read_only=True)

    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "email",
            "cpf",
            "is_staff",
            "is_active",
            "balance",
            "rollover_required",
            "first_deposit_made",
            "date_joined",
        )
