import uuid

from django.conf import settings
from django.db import models

from .defaults import GAME_TYPE
from .exceptions import ImmutableRoundError


class GameRound(models.Model):
    """One settled round. Rows are written once, inside the same transaction as the balance change."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="game_rounds",
    )
    game_type = models.CharField(max_length=32, default=GAME_TYPE)

    bet_amount = models.DecimalField(max_digits=12, decimal_places=2)
    prize_amount = models.DecimalField(max_digits=12, decimal_places=2)
    multiplier = models.DecimalField(max_digits=10, decimal_places=4)
    result_data = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="scratch_round_user_created_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRoundError("Game rounds cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRoundError("Game rounds cannot be deleted")

    def __str__(self):
        return f"{self.game_type} {self.bet_amount} -> {self.prize_amount} ({self.user_id})"
