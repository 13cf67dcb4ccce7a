from django.urls import path
from . import views

urlpatterns = [
    path("rtp/", views.rtp, name="admin-rtp"),
    path("users/", views.users, name="admin-users"),
    path("transactions/", views.transactions, name="admin-transactions"),
    path("withdrawal/<uuid:tx_id>/approve/", views.approve_withdrawal, name="admin-withdrawal-approve"),
    path("withdrawal/<uuid:tx_id>/reject/", views.reject_withdrawal, name="admin-withdrawal-reject"),
    path("refund/<uuid:tx_id>/", views.refund_deposit, name="admin-refund"),
    path("bullspay/balance/", views.gateway_balance, name="admin-gateway-balance"),
    path("bullspay/transactions/", views.gateway_transactions, name="admin-gateway-transactions"),
    path("bullspay/withdrawals/", views.gateway_withdrawals, name="admin-gateway-withdrawals"),
    path("webhooks/", views.webhooks, name="admin-webhooks"),
    path("webhooks/<str:webhook_id>/", views.delete_webhook, name="admin-webhook-delete"),
]
