import os

from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model

User = get_user_model()

ADMIN_USERNAME = "admin"
ADMIN_CPF = "00000000000"


class Command(BaseCommand):
    help = "Create the admin account, or reset its password if it already exists"

    def add_arguments(self, parser):
        parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL", "admin@kr.com"))
        parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD", "Admin@123"))

    def handle(self, *args, **options):
        email = options["email"].strip().lower()
        password = options["password"]

        user = User.objects.filter(email=email).first()

        if user:
            user.username = ADMIN_USERNAME
            user.set_password(password)
            user.is_staff = True
            user.is_superuser = True
            user.save()
            self.stdout.write(self.style.SUCCESS("✅ Admin credentials updated"))
        else:
            User.objects.create_superuser(
                username=ADMIN_USERNAME,
                email=email,
                password=password,
                cpf=ADMIN_CPF,
            )
            self.stdout.write(self.style.SUCCESS("✅ Admin account created"))

        self.stdout.write(f"📧 Email: {email}")
        self.stdout.write(self.style.WARNING("🔐 Keep these credentials safe!"))
