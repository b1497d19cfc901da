"""
Sign-in, sign-up and profile handling.

A Django user is the identity; the role stored on it decides which
profile record (doctor or patient) is attached.  Failures are raised
as :class:`~reminders.errors.AuthError` with a provider-style code so
the client can show the mapped message and keep the form in place.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import transaction
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.exceptions import TokenError

from reminders import errors
from reminders.errors import AuthError
from reminders.models import Doctor, Patient

User = get_user_model()
logger = logging.getLogger(__name__)


def sign_in(email: str, password: str):
    """Return the user for ``email``/``password`` or raise :class:`AuthError`."""
    user = User.objects.filter(email__iexact=email.strip()).first()
    if user is None:
        raise AuthError(errors.USER_NOT_FOUND)
    if not user.check_password(password):
        raise AuthError(errors.WRONG_PASSWORD)
    if not user.is_active:
        raise AuthError(errors.USER_DISABLED, status_code=status.HTTP_403_FORBIDDEN)
    return user


def sign_up(*, name: str, email: str, password: str, role: str,
            specialization: str = '', license_number: str = '', phone: str = ''):
    """Create a user and the profile record that goes with its role."""
    email = email.strip().lower()
    if role == User.ROLE_ADMIN and not settings.ALLOW_ADMIN_SIGNUP:
        raise AuthError('permission-denied', status_code=status.HTTP_403_FORBIDDEN)
    if User.objects.filter(email__iexact=email).exists():
        raise AuthError(errors.EMAIL_IN_USE)

    candidate = User(username=email, email=email, name=name)
    try:
        validate_password(password, user=candidate)
    except ValidationError:
        raise AuthError(errors.WEAK_PASSWORD)

    with transaction.atomic():
        user = User.objects.create_user(
            username=email,
            email=email,
            password=password,
            name=name,
            role=role,
            phone=phone or '',
            specialization=specialization or '',
            license_number=license_number or '',
        )
        if role == User.ROLE_DOCTOR:
            Doctor.objects.create(
                user=user,
                name=name,
                email=email,
                specialization=specialization,
                license_number=license_number,
                phone=phone or '',
            )
        elif role == User.ROLE_PATIENT:
            link_patient_record(user)
    logger.info("Signed up %s as %s", email, role)
    return user


def link_patient_record(user) -> Patient:
    """Attach the patient record registered under the user's email, or create one."""
    patient = Patient.objects.filter(email__iexact=user.email, user__isnull=True).order_by('id').first()
    if patient is None:
        return Patient.objects.create(user=user, name=user.display_name, email=user.email, phone=user.phone)
    patient.user = user
    patient.save(update_fields=['user', 'updated_at'])
    return patient


def issue_tokens(user) -> dict:
    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return {
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
    }


def sign_out(user, refresh: str | None = None) -> int:
    """Revoke the user's tokens and return how many refresh tokens were blacklisted."""
    Token.objects.filter(user=user).delete()
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
        except TokenError:
            logger.info("Ignoring invalid refresh token on sign-out for user %s", user.pk)
            return 0
        return 1
    count = 0
    for token in OutstandingToken.objects.filter(user=user):
        _, created = BlacklistedToken.objects.get_or_create(token=token)
        count += int(created)
    return count


def format_user(user) -> dict:
    data = {
        'id': user.id,
        'name': user.display_name,
        'email': user.email,
        'role': user.role,
        'avatar': user.avatar,
        'phone': user.phone,
        'isActive': user.is_active,
    }
    if user.role == User.ROLE_DOCTOR:
        data['specialization'] = user.specialization
        data['licenseNumber'] = user.license_number
    return data


def update_profile(user, *, name=None, phone=None, specialization=None, license_number=None):
    """Update the user's own profile and mirror it to the role record."""
    fields = []
    for attr, value in (('name', name), ('phone', phone),
                        ('specialization', specialization), ('license_number', license_number)):
        if value is not None:
            setattr(user, attr, value)
            fields.append(attr)
    if not fields:
        return user
    with transaction.atomic():
        user.save(update_fields=fields + ['updated_at'])
        doctor = getattr(user, 'doctor_profile', None) if user.role == User.ROLE_DOCTOR else None
        if doctor is not None:
            for attr in fields:
                setattr(doctor, attr, getattr(user, attr))
            doctor.save()
        patient = getattr(user, 'patient_profile', None) if user.role == User.ROLE_PATIENT else None
        if patient is not None:
            if 'name' in fields:
                patient.name = user.name
            if 'phone' in fields:
                patient.phone = user.phone
            patient.save()
    return user
