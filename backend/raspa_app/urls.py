from django.contrib import admin
from django.urls import path, include

from wallets.views.webhook import bullspay_webhook


urlpatterns = [
    path('admin-panel/', admin.site.urls),
    path('api/admin/', include('sa_conf.urls')),

    # Accounts
    path('api/accounts/', include('accounts.urls')),

    # Wallet / PIX
    path('api/wallet/', include('wallets.urls')),
    path('webhook/bullspay/', bullspay_webhook, name='bullspay-webhook'),

    # Scratch card
    path('api/game/', include('scratch.urls')),
]
