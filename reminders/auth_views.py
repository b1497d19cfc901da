"""
Authentication views.

Sign-in and sign-up return both the legacy DRF token and a JWT pair so
either header style can be used afterwards.  Failed attempts are
audited with the submitted email only.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenRefreshView

from reminders.errors import AuthError
from reminders.serializers.auth import (
    LoginSerializer,
    LogoutSerializer,
    ProfileUpdateSerializer,
    SignUpSerializer,
)
from reminders.services import accounts
from reminders.services.audit import log_action


def _client_ip(request):
    return request.META.get('REMOTE_ADDR')


def _session_payload(user) -> dict:
    return {'ok': True, **accounts.issue_tokens(user), 'role': user.role, 'user': accounts.format_user(user)}


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """Email/password sign-in.  The role always comes from the stored account."""
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    email = s.validated_data['email']
    try:
        user = accounts.sign_in(email, s.validated_data['password'])
    except AuthError as exc:
        try:
            log_action(user=None, action='login', object_type='user',
                       detail={'result': 'fail', 'email': email, 'code': exc.error_code, 'ip': _client_ip(request)})
        except Exception:
            pass
        raise

    try:
        log_action(user=user, action='login', object_type='user', object_id=user.id,
                   detail={'result': 'ok', 'ip': _client_ip(request)})
    except Exception:
        pass
    return Response(_session_payload(user))

# ScopedRateThrottle reads throttle_scope from the view class
login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
@permission_classes([AllowAny])
def signup_view(request):
    s = SignUpSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    user = accounts.sign_up(
        name=v['name'],
        email=v['email'],
        password=v['password'],
        role=v['role'],
        specialization=v.get('specialization', ''),
        license_number=v.get('licenseNumber', ''),
        phone=v.get('phone', ''),
    )
    try:
        log_action(user=user, action='signup', object_type='user', object_id=user.id,
                   detail={'role': user.role, 'ip': _client_ip(request)})
    except Exception:
        pass
    return Response(_session_payload(user), status=201)

signup_view.cls.throttle_scope = 'signup'


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """Revoke the legacy token and blacklist refresh tokens (the given one, or all)."""
    s = LogoutSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    count = accounts.sign_out(request.user, s.validated_data.get('refresh') or None)
    try:
        log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
                   detail={'blacklisted': count})
    except Exception:
        pass
    return Response({'ok': True, 'blacklisted': count})


@api_view(['POST'])
@permission_classes([AllowAny])
def refresh_view(request):
    """Return a new access token from refresh token."""
    resp = TokenRefreshView.as_view()(request._request)
    data = dict(resp.data)
    if resp.status_code != 200:
        return Response(data, status=resp.status_code)
    payload = {'ok': True, 'jwt_access': data.pop('access')}
    if 'refresh' in data:
        payload['jwt_refresh'] = data['refresh']
    return Response(payload)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response({'ok': True, 'data': accounts.format_user(request.user)})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def me_update_view(request):
    s = ProfileUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    user = accounts.update_profile(
        request.user,
        name=v.get('name'),
        phone=v.get('phone'),
        specialization=v.get('specialization'),
        license_number=v.get('licenseNumber'),
    )
    try:
        log_action(user=user, action='profile_update', object_type='user', object_id=user.id,
                   detail={'fields': sorted(v)})
    except Exception:
        pass
    return Response({'ok': True, 'data': accounts.format_user(user)})
