"""
API URL Configuration
"""
from django.urls import include, path

from apps.accounts.urls import address_urlpatterns, auth_urlpatterns
from apps.catalog.urls import category_urlpatterns, product_urlpatterns, promotion_urlpatterns
from apps.content.urls import blog_urlpatterns, service_urlpatterns, testimonial_urlpatterns
from apps.quotes.urls import quote_urlpatterns
from apps.shop.urls import cart_urlpatterns, order_urlpatterns
from .views import HealthCheckView

app_name = 'api'

urlpatterns = [
    path('auth/', include(auth_urlpatterns)),
    path('addresses/', include(address_urlpatterns)),
    path('categories/', include(category_urlpatterns)),
    path('products/', include(product_urlpatterns)),
    path('promotions/', include(promotion_urlpatterns)),
    path('cart/', include(cart_urlpatterns)),
    path('orders/', include(order_urlpatterns)),
    path('quotes/', include(quote_urlpatterns)),
    path('blog/', include(blog_urlpatterns)),
    path('services/', include(service_urlpatterns)),
    path('testimonials/', include(testimonial_urlpatterns)),

    # Health check
    path('health/', HealthCheckView.as_view(), name='health'),
]
