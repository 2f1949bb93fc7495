from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema
from .serializers import (
    LoginSerializer,
    UserSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
)
from .services import (
    log_in,
    get_user_profile,
    update_user_profile,
    LoginFailedError,
    AccountDisabledError,
)


@extend_schema(request=LoginSerializer, tags=['auth'])
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Exchange email and password for a JWT pair."""
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = log_in(**serializer.validated_data)
    except LoginFailedError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except AccountDisabledError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    refresh = RefreshToken.for_user(user)
    return Response({
        'user': UserSerializer(user).data,
        'tokens': {
            'access': str(refresh.access_token),
            'refresh': str(refresh),
        },
    })


@extend_schema(
    methods=['GET'],
    responses={200: ProfileSerializer},
    tags=['auth'],
)
@extend_schema(
    methods=['PATCH'],
    request=ProfileUpdateSerializer,
    responses={200: ProfileSerializer},
    tags=['auth'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def current_user(request):
    """
    The logged-in diner's profile.

    GET: account, bank link status and restaurant totals
    PATCH: change display_name and/or avatar
    """
    if request.method == 'PATCH':
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        update_user_profile(user=request.user, **serializer.validated_data)

    return Response(ProfileSerializer(get_user_profile(user=request.user)).data)
