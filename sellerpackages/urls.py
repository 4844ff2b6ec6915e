from django.urls import path
from .views import package_detail, package_list

app_name = 'sellerpackages'

urlpatterns = [
    path('', package_list, name='package-list'),
    path('<slug:slug>/', package_detail, name='package-detail'),
]
