from rest_framework import authentication
from rest_framework import exceptions
from django.conf import settings
import jwt
from datetime import datetime, timedelta, timezone
from .models import CustomUser


def generate_jwt_token(user):
    """
    Generate JWT token for session management after password login.
    """
    now = datetime.now(timezone.utc)
    payload = {
        'user_id': user.id,
        'phone_number': user.phone_number,
        'role': user.role,
        'exp': now + timedelta(days=7),
        'iat': now
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm='HS256')
    return token


def decode_jwt_token(token):
    """
    Decode and verify JWT token.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=['HS256'])
        return payload
    except jwt.ExpiredSignatureError:
        raise exceptions.AuthenticationFailed('Token has expired')
    except jwt.InvalidTokenError:
        raise exceptions.AuthenticationFailed('Invalid token')


class JWTAuthentication(authentication.BaseAuthentication):
    """
    Custom authentication class for JWT token verification.
    """

    def authenticate(self, request):
        auth_header = request.META.get('HTTP_AUTHORIZATION', '')

        if not auth_header.startswith('Bearer '):
            return None

        token = auth_header.split('Bearer ')[1]
        payload = decode_jwt_token(token)
        user_id = payload.get('user_id')

        try:
            user = CustomUser.objects.get(id=user_id)
        except CustomUser.DoesNotExist:
            raise exceptions.AuthenticationFailed('User not found')

        if not user.is_active:
            raise exceptions.AuthenticationFailed('User account is disabled')

        return (user, None)

    def authenticate_header(self, request):
        return 'Bearer'
