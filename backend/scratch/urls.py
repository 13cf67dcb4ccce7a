from django.urls import path
from . import views

urlpatterns = [
    path("scratch/", views.play, name="scratch-play"),
    path("history/", views.history, name="scratch-history"),
    path("bets/", views.bets, name="scratch-bets"),
]
