from django.contrib import admin
from .models import SellerPackage

@admin.register(SellerPackage)
class SellerPackageAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'price', 'payment_amount', 'recommended', 'is_active')
    list_filter = ('is_active', 'recommended')
    search_fields = ('name', 'slug')
    ordering = ('-is_active', 'price')  # Active packages first, cheapest first
    list_editable = ('is_active',)
