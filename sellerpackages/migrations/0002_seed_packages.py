from django.db import migrations

PACKAGES = [
    {
        "slug": "basic",
        "name": "Basic",
        "price": 800,
        "payment_amount": 5,
        "recommended": False,
        "features": [
            "1 Photo Upload",
            "Book Appointment Feature",
            "Basic Visibility",
            "Mabinti Community Access",
        ],
        "photo_uploads": 1,
    },
    {
        "slug": "standard",
        "name": "Standard",
        "price": 1500,
        "payment_amount": 10,
        "recommended": True,
        "features": [
            "2 Photo Uploads",
            "Book Appointment Feature",
            "Enhanced Visibility",
            "Mabinti Community Access",
        ],
        "photo_uploads": 2,
    },
    {
        "slug": "premium",
        "name": "Premium",
        "price": 2500,
        "payment_amount": 15,
        "recommended": False,
        "features": [
            "3 Photo Uploads",
            "Book Appointment Feature",
            "Premium Visibility",
            "Featured Listing",
            "Mabinti Community Access",
        ],
        "photo_uploads": 3,
    },
]


def seed_packages(apps, schema_editor):
    SellerPackage = apps.get_model('sellerpackages', 'SellerPackage')
    for package in PACKAGES:
        SellerPackage.objects.update_or_create(slug=package["slug"], defaults=package)


def remove_packages(apps, schema_editor):
    SellerPackage = apps.get_model('sellerpackages', 'SellerPackage')
    SellerPackage.objects.filter(slug__in=[p["slug"] for p in PACKAGES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('sellerpackages', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_packages, remove_packages),
    ]
