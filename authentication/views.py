from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from django.contrib.auth import authenticate
from django_ratelimit.decorators import ratelimit
import logging
from .models import CustomUser
from .serializers import UserSerializer, SignupSerializer
from .authentication import generate_jwt_token

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
@ratelimit(key='ip', rate='5/m', method='POST', block=True)
def login(request):
    """
    Login with username and password.
    Endpoint: POST /api/auth/login/
    Body: { "username": "...", "password": "..." }

    Rate Limit: 5 requests per minute per IP address
    """
    username = request.data.get('username')
    password = request.data.get('password')

    if not username or not password:
        return Response({
            'success': False,
            'message': 'Username and password are required'
        }, status=status.HTTP_400_BAD_REQUEST)

    user = authenticate(username=username, password=password)

    if not user:
        logger.info(f"Failed login attempt for {username}")
        return Response({
            'success': False,
            'message': 'Invalid username or password'
        }, status=status.HTTP_401_UNAUTHORIZED)

    jwt_token = generate_jwt_token(user)

    return Response({
        'success': True,
        'token': jwt_token,
        'user': UserSerializer(user).data,
        'role': user.role
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([AllowAny])
@ratelimit(key='ip', rate='3/h', method='POST', block=True)
def signup(request):
    """
    Create a buyer or supplier account.
    Endpoint: POST /api/auth/signup/

    Admin accounts are created with the create_admin management command.
    Rate Limit: 3 requests per hour per IP address
    """
    serializer = SignupSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({
            'success': False,
            'errors': serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    data = dict(serializer.validated_data)
    password = data.pop('password')
    user = CustomUser.objects.create_user(password=password, **data)
    logger.info(f"New {user.role} account created: {user.username}")

    return Response({
        'success': True,
        'token': generate_jwt_token(user),
        'user': UserSerializer(user).data,
        'role': user.role,
        'message': 'Account created successfully'
    }, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def get_user_profile(request):
    """
    GET /api/auth/me/ - current user profile
    PATCH /api/auth/me/ - update name, contact and business details
    """
    user = request.user

    if request.method == 'PATCH':
        serializer = UserSerializer(user, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response({
                'success': False,
                'errors': serializer.errors
            }, status=status.HTTP_400_BAD_REQUEST)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_200_OK)

    serializer = UserSerializer(user)
    return Response(serializer.data, status=status.HTTP_200_OK)
