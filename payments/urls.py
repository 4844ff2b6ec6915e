from django.urls import re_path
from .views import health, initiate_stk_push, mpesa_callback, payment_status, route_index

app_name = 'mpesa'

urlpatterns = [
    re_path(r'^stkpush/?$', initiate_stk_push, name='initiate-stk-push'),
    re_path(r'^callback/?$', mpesa_callback, name='mpesa-callback'),
    re_path(r'^payment-status/?$', payment_status, name='payment-status'),
    re_path(r'^health/?$', health, name='health'),
    re_path(r'^test/?$', route_index, name='test'),
]
