# accounts/models.py
from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models

cpf_validator = RegexValidator(r"^\d{11}$", "CPF must have exactly 11 digits")


class User(AbstractUser):
    email = models.EmailField(unique=True, db_index=True)
    cpf = models.CharField(
        max_length=11,
        unique=True,
        validators=[cpf_validator],
    )

    def __str__(self):
        return self.email
