from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'restaurants'

# Note: stats must be registered BEFORE empty prefix to avoid URL conflicts
router = DefaultRouter()
router.register(r'stats', views.UserRestaurantStatsViewSet, basename='stats')
router.register(r'', views.RestaurantViewSet, basename='restaurant')

urlpatterns = [
    # GET    /api/restaurants/                    - List restaurants
    # GET    /api/restaurants/{id}/               - Get restaurant
    # GET    /api/restaurants/{id}/leaderboard/   - Top diners

    # GET    /api/restaurants/stats/              - Own visit rollups
    # GET    /api/restaurants/stats/summary/      - Own spending totals
    # POST   /api/restaurants/stats/recompute/    - Rebuild own rollups
    path('', include(router.urls)),
]
