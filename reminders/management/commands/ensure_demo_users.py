# reminders/management/commands/ensure_demo_users.py
from django.core.management.base import BaseCommand
from django.db import transaction

from reminders.models import Doctor, User
from reminders.services.accounts import link_patient_record

DEMO_USERS = [
    ("admin@beom-med.com", "Administrator", "admin", "admin123"),
    ("michael.chen@beom-med.com", "Dr. Michael Chen", "doctor", "doctor123"),
    ("sarah.wilson@beom-med.com", "Dr. Sarah Wilson", "doctor", "doctor123"),
    ("john.smith@email.com", "John Smith", "patient", "patient123"),
]


class Command(BaseCommand):
    help = "Ensure the demo accounts exist with their known passwords (idempotent)."

    @transaction.atomic
    def handle(self, *args, **opts):
        for email, name, role, password in DEMO_USERS:
            u, created = User.objects.get_or_create(
                username=email,
                defaults={"email": email, "name": name, "role": role, "is_active": True},
            )
            # reset credentials and role on every run
            u.email = email
            u.role = role
            u.is_active = True
            u.is_staff = role == User.ROLE_ADMIN
            u.set_password(password)
            u.save()
            if role == User.ROLE_DOCTOR:
                self._link_doctor(u)
            elif role == User.ROLE_PATIENT and not hasattr(u, "patient_profile"):
                link_patient_record(u)
            self.stdout.write(self.style.SUCCESS(f"{'created' if created else 'ok'}: {email} ({role})"))
        self.stdout.write(self.style.SUCCESS("All demo users ensured."))

    def _link_doctor(self, user):
        if Doctor.objects.filter(user=user).exists():
            return
        doctor = Doctor.objects.filter(name=user.name, user__isnull=True).order_by("id").first()
        if doctor is None:
            doctor = Doctor(name=user.name, email=user.email)
        doctor.user = user
        doctor.is_active = True
        doctor.save()
        user.specialization = doctor.specialization
        user.license_number = doctor.license_number
        user.save(update_fields=["specialization", "license_number", "updated_at"])
