from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema
from .serializers import (
    RestaurantSerializer,
    UserRestaurantStatsSerializer,
    LeaderboardEntrySerializer,
    SpendingSummarySerializer,
)
from .services import (
    search_restaurants,
    get_restaurant_leaderboard,
    get_user_restaurant_stats,
    get_user_spending_summary,
    recompute_user_restaurant_stats,
    RestaurantNotFoundError,
    InvalidStatsOrderingError,
)


class RestaurantPagination(PageNumberPagination):
    """Custom pagination for restaurants."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class RestaurantViewSet(mixins.ListModelMixin,
                        mixins.RetrieveModelMixin,
                        viewsets.GenericViewSet):
    """
    ViewSet for browsing restaurants.

    Restaurants are created by the transaction import, never through the API.

    list: Get restaurants (?search=, ?visited=true for own visits)
    retrieve: Get a specific restaurant
    leaderboard: Diners ranked by spend at a restaurant
    """

    serializer_class = RestaurantSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    pagination_class = RestaurantPagination

    def get_queryset(self):
        visited_by = None
        if self.request.query_params.get('visited') == 'true' and self.request.user.is_authenticated:
            visited_by = self.request.user.id

        return search_restaurants(
            search=self.request.query_params.get('search'),
            visited_by=visited_by,
        )

    @extend_schema(responses={200: LeaderboardEntrySerializer(many=True)})
    @action(detail=True, methods=['get'])
    def leaderboard(self, request, pk=None):
        """Top diners of a restaurant by total spent."""
        try:
            limit = int(request.query_params.get('limit', 10))
        except ValueError:
            limit = None
        if limit is None or limit < 1:
            return Response({'error': 'limit must be a positive integer'}, status=status.HTTP_400_BAD_REQUEST)
        limit = min(limit, 100)

        try:
            entries = get_restaurant_leaderboard(restaurant_id=pk, limit=limit)
        except RestaurantNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(LeaderboardEntrySerializer(entries, many=True).data)


class UserRestaurantStatsViewSet(viewsets.GenericViewSet):
    """
    The current user's restaurant visit rollups.

    list: Rollups (?ordering=visits|spend|recent)
    summary: Totals across all restaurants
    recompute: Rebuild rollups from transactions
    """

    serializer_class = UserRestaurantStatsSerializer
    permission_classes = [IsAuthenticated]

    def list(self, request):
        ordering = request.query_params.get('ordering', 'visits')
        try:
            stats = get_user_restaurant_stats(user_id=request.user.id, ordering=ordering)
        except InvalidStatsOrderingError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(UserRestaurantStatsSerializer(stats, many=True).data)

    @extend_schema(responses={200: SpendingSummarySerializer})
    @action(detail=False, methods=['get'])
    def summary(self, request):
        summary = get_user_spending_summary(user_id=request.user.id)
        return Response(SpendingSummarySerializer(summary).data)

    @extend_schema(request=None, responses={200: UserRestaurantStatsSerializer(many=True)})
    @action(detail=False, methods=['post'])
    def recompute(self, request):
        stats = recompute_user_restaurant_stats(user_id=request.user.id)
        return Response(UserRestaurantStatsSerializer(stats, many=True).data)
