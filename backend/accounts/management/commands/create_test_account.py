from decimal import Decimal

from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from django.db import transaction

from wallets.models import Wallet

User = get_user_model()


# ============================
# 🔧 TEST ACCOUNT
# ============================
TEST_ACCOUNT = {
    "username": "teste500",
    "email": "teste500@example.com",
    "password": "Teste@123",
    "cpf": "12345678901",
    "balance": Decimal("500.00"),
}
# ============================


class Command(BaseCommand):
    help = "Create (or top up) a funded player account with no rollover pending"

    def handle(self, *args, **kwargs):
        data = TEST_ACCOUNT

        with transaction.atomic():
            user = User.objects.filter(email=data["email"]).first()
            created = user is None

            if created:
                user = User.objects.create_user(
                    username=data["username"],
                    email=data["email"],
                    password=data["password"],
                    cpf=data["cpf"],
                )

            wallet, _ = Wallet.objects.select_for_update().get_or_create(user=user)
            wallet.balance = data["balance"]
            wallet.rollover_required = Decimal("0.00")
            wallet.first_deposit_made = True
            wallet.save()

        self.stdout.write(
            self.style.SUCCESS("✅ Test account created" if created else "✅ Test account updated")
        )
        self.stdout.write("=" * 50)
        self.stdout.write(f"📧 Email:    {data['email']}")
        self.stdout.write(f"🔑 Password: {data['password']}")
        self.stdout.write(f"💰 Balance:  R$ {data['balance']:.2f}")
        self.stdout.write("🎯 Rollover: R$ 0.00 (withdrawals unlocked)")
        self.stdout.write("=" * 50)
