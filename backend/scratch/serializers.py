from rest_framework import serializers

from .models import GameRound


class GameRoundSerializer(serializers.ModelSerializer):
    class Meta:
        model = GameRound
        fields = (
            "id",
            "game_type",
            "bet_amount",
            "prize_amount",
            "multiplier",
            "result_data",
            "created_at",
        )
