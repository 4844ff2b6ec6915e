from django.contrib import admin
from django.urls import include, path, re_path

from payments import views as payment_views
from .views import health

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health', health, name='health'),
    path('api/mpesa/', include('payments.urls')),
    path('api/packages/', include('sellerpackages.urls')),

    # The frontend talks to the payment endpoints without the /api/mpesa prefix.
    re_path(r'^stkpush/?$', payment_views.initiate_stk_push, name='stkpush'),
    re_path(r'^callback/?$', payment_views.mpesa_callback, name='callback'),
    re_path(r'^payment-status/?$', payment_views.payment_status, name='payment-status'),
]
