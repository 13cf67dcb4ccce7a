import itertools
from decimal import Decimal
from unittest import mock

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from wallets.models import Wallet

User = get_user_model()


@pytest.fixture
def make_user():
    """Create a player whose wallet starts with the given balance / rollover."""
    counter = itertools.count(1)

    def _make(balance="0.00", rollover="0.00", first_deposit_made=False, **extra):
        n = next(counter)
        user = User.objects.create_user(
            username=f"player{n}",
            email=f"player{n}@example.com",
            password="Senha@123",
            cpf=f"{n:011d}",
            **extra,
        )
        Wallet.objects.filter(user=user).update(
            balance=Decimal(balance),
            rollover_required=Decimal(rollover),
            first_deposit_made=first_deposit_made,
        )
        return User.objects.get(pk=user.pk)

    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin_user(make_user):
    return make_user(is_staff=True, is_superuser=True)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def gateway():
    """Stand-in for the BullsPay client; tests set return values per call."""
    return mock.Mock(name="BullsPayService")


@pytest.fixture
def bullspay_settings(settings):
    settings.BULLSPAY_CLIENT_ID = "pk_test"
    settings.BULLSPAY_API_KEY = "sk_test"
    settings.BULLSPAY_BASE_URL = "https://gateway.test/api"
    return settings


def wallet_of(user):
    return Wallet.objects.get(user=user)
