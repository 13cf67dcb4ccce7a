from .models import Setting


def get_setting(key):
    return Setting.objects.filter(key=key).values_list("value", flat=True).first()


def set_setting(key, value, description=None):
    defaults = {"value": str(value)}
    if description is not None:
        defaults["description"] = description

    setting, _ = Setting.objects.update_or_create(key=key, defaults=defaults)
    return setting
