from django.db import models


class Setting(models.Model):
    """Runtime configuration row, editable without a deploy."""

    key = models.CharField(max_length=64, unique=True)
    value = models.TextField()
    description = models.CharField(max_length=255, blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.key}={self.value}"
