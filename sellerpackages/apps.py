from django.apps import AppConfig


class SellerPackagesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'sellerpackages'
    verbose_name = 'Seller packages'
