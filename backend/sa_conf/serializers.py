from rest_framework import serializers

from scratch.defaults import RTP_MAX, RTP_MIN


class RTPSerializer(serializers.Serializer):
    rtp = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=RTP_MIN, max_value=RTP_MAX)


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500)


class WebhookSerializer(serializers.Serializer):
    url = serializers.URLField()
    send_transaction_event = serializers.BooleanField(default=True)
    send_withdraw_event = serializers.BooleanField(default=False)
