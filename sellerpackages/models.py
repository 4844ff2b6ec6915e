from django.db import models


class SellerPackage(models.Model):
    """
    A listing package a seller pays for before signing up.

    `price` is what the package is advertised at; `payment_amount` is what
    the STK push actually charges.
    """
    slug = models.SlugField(max_length=50, unique=True)
    name = models.CharField(max_length=100)
    price = models.PositiveIntegerField()
    payment_amount = models.PositiveIntegerField()
    recommended = models.BooleanField(default=False)
    features = models.JSONField(default=list, blank=True)
    photo_uploads = models.PositiveIntegerField(default=0)
    video_uploads = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ('price',)

    def __str__(self):
        return f"{self.name} @ {self.price}/="

    def as_dict(self):
        return {
            "id": self.slug,
            "name": self.name,
            "price": self.price,
            "paymentAmount": self.payment_amount,
            "recommended": self.recommended,
            "features": self.features,
            "photoUploads": self.photo_uploads,
            "videoUploads": self.video_uploads,
        }
