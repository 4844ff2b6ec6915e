from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status

from .models import SellerPackage


@api_view(['GET'])
def package_list(request):
    packages = SellerPackage.objects.filter(is_active=True)
    return Response([package.as_dict() for package in packages], status=status.HTTP_200_OK)


@api_view(['GET'])
def package_detail(request, slug):
    try:
        package = SellerPackage.objects.get(slug=slug, is_active=True)
    except SellerPackage.DoesNotExist:
        return Response(
            {"error": "Invalid or inactive package selected"},
            status=status.HTTP_404_NOT_FOUND
        )
    return Response(package.as_dict(), status=status.HTTP_200_OK)
