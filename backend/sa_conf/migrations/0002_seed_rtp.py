from django.db import migrations


def seed_rtp(apps, schema_editor):
    Setting = apps.get_model("sa_conf", "Setting")
    Setting.objects.get_or_create(
        key="rtp_percentage",
        defaults={"value": "95.0", "description": "Return to player (%) for scratch cards"},
    )


def unseed_rtp(apps, schema_editor):
    Setting = apps.get_model("sa_conf", "Setting")
    Setting.objects.filter(key="rtp_percentage").delete()


class Migration(migrations.Migration):

    dependencies = [
        ("sa_conf", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_rtp, unseed_rtp),
    ]
