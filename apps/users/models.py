# apps/users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    class Role(models.TextChoices):
        EMPLOYER = 'employer', 'Employer'
        JOBSEEKER = 'jobseeker', 'Job Seeker'
        ADMIN = 'admin', 'Admin'

    role = models.CharField(max_length=10, choices=Role.choices, default=Role.JOBSEEKER)
    name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(unique=True)
    is_blocked = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def snapshot(self):
        """Display fields embedded in messages and conversations."""
        return {
            "id": self.id,
            "name": self.name or self.email,
            "email": self.email,
            "role": self.role,
        }

    def __str__(self):
        return self.email
