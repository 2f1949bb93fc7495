import uuid

from rest_framework import mixins, viewsets, status, serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, inline_serializer
from .models import Transaction
from .serializers import (
    TransactionSerializer,
    BankLinkSerializer,
    ExchangeTokenSerializer,
    SyncRequestSerializer,
    SyncResultSerializer,
)
from .services import (
    create_link_token,
    link_bank_account,
    list_linked_accounts,
    sync_transactions,
    BankAggregatorError,
    BankLinkNotFoundError,
)


class TransactionPagination(PageNumberPagination):
    """Custom pagination for transactions."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class TransactionViewSet(mixins.ListModelMixin,
                         mixins.RetrieveModelMixin,
                         viewsets.GenericViewSet):
    """
    ViewSet for the current user's imported transactions.

    list: Get own transactions, newest first (?restaurant=<id> to filter)
    retrieve: Get one transaction
    link_token: Start the bank linking flow
    exchange_token: Finish the bank linking flow
    accounts: List accounts of the linked bank
    sync: Import restaurant transactions from the linked bank
    """

    serializer_class = TransactionSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = TransactionPagination

    def get_queryset(self):
        """Only the requesting user's transactions."""
        queryset = (
            Transaction.objects
            .filter(user=self.request.user)
            .select_related('restaurant')
        )

        restaurant_id = self.request.query_params.get('restaurant')
        if restaurant_id:
            try:
                queryset = queryset.filter(restaurant_id=uuid.UUID(restaurant_id))
            except ValueError:
                return queryset.none()

        return queryset

    @extend_schema(
        request=None,
        responses={200: inline_serializer('LinkTokenResponse', {'link_token': serializers.CharField()})},
    )
    @action(detail=False, methods=['post'], url_path='link-token')
    def link_token(self, request):
        """Create a link token for the bank linking flow."""
        try:
            token = create_link_token(user=request.user)
        except BankAggregatorError as e:
            return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)

        return Response({'link_token': token})

    @extend_schema(request=ExchangeTokenSerializer, responses={201: BankLinkSerializer})
    @action(detail=False, methods=['post'], url_path='exchange-token')
    def exchange_token(self, request):
        """Exchange a public token and store the bank link."""
        serializer = ExchangeTokenSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            link = link_bank_account(user=request.user, **serializer.validated_data)
        except BankAggregatorError as e:
            return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)

        return Response(BankLinkSerializer(link).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def accounts(self, request):
        """List accounts of the linked bank."""
        try:
            accounts = list_linked_accounts(user=request.user)
        except BankLinkNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except BankAggregatorError as e:
            return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)

        return Response(accounts)

    @extend_schema(request=SyncRequestSerializer, responses={200: SyncResultSerializer})
    @action(detail=False, methods=['post'])
    def sync(self, request):
        """Import restaurant transactions and refresh visit stats."""
        serializer = SyncRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = sync_transactions(user=request.user, **serializer.validated_data)
        except BankLinkNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except BankAggregatorError as e:
            return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)

        return Response(SyncResultSerializer(result.as_dict()).data)
